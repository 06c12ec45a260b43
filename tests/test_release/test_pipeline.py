"""Tests for the end-to-end release pipeline."""

import json
from unittest.mock import Mock

import pytest
from structlog.testing import capture_logs

from releasebox.config.models import PipelineConfig
from releasebox.core.errors import (
    BuildError,
    ConfigError,
    NameCollisionError,
    NamingError,
    TriggerError,
)
from releasebox.models.results import DEFAULT_RELEASE_BODY, PublishResult
from releasebox.protocols import ReleasePublisherProtocol
from releasebox.publish.local import LocalReleasePublisher
from releasebox.release.pipeline import ReleasePipeline, create_release_pipeline
from releasebox.release.trigger import Trigger
from releasebox.store.local_store import LocalArtifactStore


class TestReleasePipeline:
    """Test a full run with a fake build driver and local store."""

    @pytest.fixture(autouse=True)
    def _setup(self, tmp_path, fake_build_driver, wasabi_config):
        self.tmp_path = tmp_path
        self.config = wasabi_config
        self.driver = fake_build_driver()
        self.store_root = tmp_path / "store"
        self.store = LocalArtifactStore(self.store_root)
        self.publisher = Mock(spec=ReleasePublisherProtocol)
        self.publisher.publish.side_effect = lambda output_dir, record: PublishResult(
            tag=record.tag, assets=sorted(p.name for p in output_dir.iterdir())
        )
        self.work_dir = tmp_path / "work"

    def _pipeline(self, config=None, driver=None):
        return ReleasePipeline(
            config or self.config,
            driver or self.driver,
            self.store,
            publisher=self.publisher,
        )

    def test_tag_push_publishes_three_windows_binaries(self):
        result = self._pipeline().run(Trigger.from_ref("v1.0.0"), self.work_dir)

        output = self.work_dir / "out"
        assert sorted(p.name for p in output.iterdir()) == [
            "wasabi-windows-arm64.exe",
            "wasabi-windows-x64.exe",
            "wasabi-windows-x86.exe",
        ]
        assert (output / "wasabi-windows-x64.exe").read_text() == (
            "binary for x86_64-pc-windows-msvc"
        )
        self.publisher.publish.assert_called_once()
        output_dir, record = self.publisher.publish.call_args.args
        assert output_dir == output
        assert record.tag == "v1.0.0"
        assert record.draft is True
        assert record.body == DEFAULT_RELEASE_BODY
        assert result.published
        assert result.tag == "v1.0.0"
        assert len(result.built) == 3

    def test_store_holds_one_artifact_per_target(self):
        self._pipeline().run(Trigger.from_ref("v1.0.0"), self.work_dir)

        assert self.store.list_artifacts() == [
            "wasabi-windows-arm64",
            "wasabi-windows-x64",
            "wasabi-windows-x86",
        ]

    def test_built_artifacts_are_sorted(self):
        result = self._pipeline().run(Trigger.from_ref("v1.0.0"), self.work_dir)

        assert [a.artifact_name for a in result.built] == [
            "wasabi-windows-arm64",
            "wasabi-windows-x64",
            "wasabi-windows-x86",
        ]

    def test_shared_label_keeps_last_processed_target(self):
        config = PipelineConfig.model_validate(
            {
                "project_name": "wasabi",
                "targets": [
                    {"name": "x86_64-pc-windows-msvc", "arch": "x64"},
                    {"name": "x86_64-pc-windows-gnu", "arch": "x64"},
                ],
            }
        )

        result = self._pipeline(config=config).run(
            Trigger.from_ref("v1.0.0"), self.work_dir
        )

        output = self.work_dir / "out"
        assert [p.name for p in output.iterdir()] == ["wasabi-windows-x64.exe"]
        # gnu sorts before msvc, so the msvc upload replaces it
        assert (output / "wasabi-windows-x64.exe").read_text() == (
            "binary for x86_64-pc-windows-msvc"
        )
        assert result.published

    def test_shared_label_rejected_under_error_policy(self):
        config = PipelineConfig.model_validate(
            {
                "project_name": "wasabi",
                "targets": [
                    {"name": "x86_64-pc-windows-msvc", "arch": "x64"},
                    {"name": "x86_64-pc-windows-gnu", "arch": "x64"},
                ],
                "naming": {"on_collision": "error"},
            }
        )

        with pytest.raises(NameCollisionError, match="wasabi-windows-x64"):
            self._pipeline(config=config).run(
                Trigger.from_ref("v1.0.0"), self.work_dir
            )

        assert self.driver.built == []
        self.publisher.publish.assert_not_called()

    def test_build_failure_publishes_nothing(self, fake_build_driver):
        driver = fake_build_driver(
            fail={"i686-pc-windows-msvc": BuildError("linker failed")}
        )

        with pytest.raises(BuildError, match="linker failed"):
            self._pipeline(driver=driver).run(
                Trigger.from_ref("v1.0.0"), self.work_dir
            )

        self.publisher.publish.assert_not_called()
        assert not self.store_root.exists()
        assert not (self.work_dir / "out").exists()

    def test_unexpected_build_exception_becomes_build_error(self, fake_build_driver):
        driver = fake_build_driver(fail={"x86_64-pc-windows-msvc": RuntimeError("boom")})

        with pytest.raises(BuildError, match="x86_64-pc-windows-msvc") as exc:
            self._pipeline(driver=driver).run(
                Trigger.from_ref("v1.0.0"), self.work_dir
            )

        assert isinstance(exc.value.__cause__, RuntimeError)
        self.publisher.publish.assert_not_called()

    def test_push_of_non_release_tag_is_rejected(self):
        with pytest.raises(TriggerError):
            self._pipeline().run(Trigger.from_ref("nightly"), self.work_dir)

        assert self.driver.built == []

    def test_manual_run_on_branch_stages_without_publishing(self):
        trigger = Trigger.from_ref("refs/heads/main", "workflow_dispatch")

        result = self._pipeline().run(trigger, self.work_dir)

        self.publisher.publish.assert_not_called()
        assert result.publish is None
        assert not result.published
        assert result.staging is not None
        assert len(result.staging.staged) == 3
        assert any("not a release tag" in m for m in result.messages)

    def test_manual_run_on_bare_branch_name_stages_without_publishing(self):
        trigger = Trigger.from_ref("main", "workflow_dispatch")

        result = self._pipeline().run(trigger, self.work_dir)

        self.publisher.publish.assert_not_called()
        assert not result.published
        assert len(result.staging.staged) == 3

    def test_manual_run_on_tag_publishes(self):
        trigger = Trigger.from_ref("refs/tags/v1.0.0", "workflow_dispatch")

        result = self._pipeline().run(trigger, self.work_dir)

        assert result.published

    def test_without_publisher_nothing_is_published(self):
        pipeline = ReleasePipeline(self.config, self.driver, self.store)

        result = pipeline.run(Trigger.from_ref("v1.0.0"), self.work_dir)

        assert result.publish is None
        assert any("No publisher configured" in m for m in result.messages)

    def test_no_targets(self):
        config = PipelineConfig(project_name="wasabi")

        with pytest.raises(ConfigError, match="No build targets"):
            self._pipeline(config=config).run(
                Trigger.from_ref("v1.0.0"), self.work_dir
            )

    def test_rerun_replaces_previous_output(self):
        pipeline = self._pipeline()
        pipeline.run(Trigger.from_ref("v1.0.0"), self.work_dir)
        stale = self.work_dir / "out" / "stale.txt"
        stale.write_text("old")

        pipeline.run(Trigger.from_ref("v1.0.1"), self.work_dir)

        assert not stale.exists()
        assert len(list((self.work_dir / "out").iterdir())) == 3

    def test_explicit_output_dir(self):
        output = self.tmp_path / "release"

        result = self._pipeline().run(
            Trigger.from_ref("v1.0.0"), self.work_dir, output_dir=output
        )

        assert result.staging is not None
        assert result.staging.output_dir == output
        assert len(list(output.iterdir())) == 3

    def test_max_workers_setting(self):
        config = self.config.model_copy(
            update={"build": self.config.build.model_copy(update={"max_workers": 1})}
        )

        result = self._pipeline(config=config).run(
            Trigger.from_ref("v1.0.0"), self.work_dir
        )

        assert len(result.built) == 3


class TestBinaryName:
    """Test how a custom binary name flows into published asset names."""

    @pytest.fixture(autouse=True)
    def _setup(self, tmp_path):
        self.store = LocalArtifactStore(tmp_path / "store")
        self.work_dir = tmp_path / "work"

    def _config(self, binary_name, on_missing="fallback"):
        return PipelineConfig.model_validate(
            {
                "project_name": "wasabi",
                "targets": [{"name": "x86_64-pc-windows-msvc", "arch": "x64"}],
                "build": {"binary_name": binary_name},
                "naming": {"on_missing_project_name": on_missing},
            }
        )

    def test_binary_name_with_project_prefix_keeps_its_suffix(
        self, fake_build_driver
    ):
        driver = fake_build_driver(binary_name="wasabi-cli")
        pipeline = ReleasePipeline(self._config("wasabi-cli"), driver, self.store)

        with capture_logs() as logs:
            result = pipeline.run(Trigger.from_ref("v1.0.0"), self.work_dir)

        assert result.staging.destination_names() == ["wasabi-windows-x64-cli.exe"]
        assert not any(
            log["event"] == "binary_name_without_project_prefix" for log in logs
        )

    def test_unrelated_binary_name_warns_and_falls_back(self, fake_build_driver):
        driver = fake_build_driver(binary_name="foo")
        pipeline = ReleasePipeline(self._config("foo"), driver, self.store)

        with capture_logs() as logs:
            result = pipeline.run(Trigger.from_ref("v1.0.0"), self.work_dir)

        assert result.staging.destination_names() == ["wasabi-windows-x64foo.exe"]
        warning = next(
            log for log in logs if log["event"] == "binary_name_without_project_prefix"
        )
        assert warning["binary_name"] == "foo"
        assert warning["log_level"] == "warning"

    def test_unrelated_binary_name_rejected_before_building(self, fake_build_driver):
        driver = fake_build_driver(binary_name="foo")
        pipeline = ReleasePipeline(self._config("foo", "reject"), driver, self.store)

        with pytest.raises(NamingError, match="does not start with project name"):
            pipeline.run(Trigger.from_ref("v1.0.0"), self.work_dir)

        assert driver.built == []


class TestPipelineWithLocalPublisher:
    """Test a dry run writing the release to disk."""

    def test_dry_run_release(self, tmp_path, fake_build_driver, wasabi_config):
        release_dir = tmp_path / "releases"
        pipeline = create_release_pipeline(
            wasabi_config,
            fake_build_driver(),
            LocalArtifactStore(tmp_path / "store"),
            publisher=LocalReleasePublisher(release_dir),
        )

        result = pipeline.run(Trigger.from_ref("v1.0.0"), tmp_path / "work")

        record = json.loads((release_dir / "v1.0.0" / "release.json").read_text())
        assert record["tag"] == "v1.0.0"
        assert record["draft"] is True
        assert record["assets"] == [
            "wasabi-windows-arm64.exe",
            "wasabi-windows-x64.exe",
            "wasabi-windows-x86.exe",
        ]
        assert result.publish is not None
        assert result.publish.url.startswith("file://")
