"""Tests for CLI command execution."""

import json
from unittest.mock import Mock, patch

import pytest

from releasebox.cli import app
from releasebox.cli.commands import register_all_commands
from releasebox.core.errors import BuildError
from releasebox.models.results import PublishResult


register_all_commands(app)

WINDOWS_TARGETS = [
    {"name": "x86_64-pc-windows-msvc", "arch": "x64"},
    {"name": "i686-pc-windows-msvc", "arch": "x86"},
    {"name": "aarch64-pc-windows-msvc", "arch": "arm64"},
]


class TestAppBasics:
    """Test global options."""

    def test_help(self, cli_runner):
        result = cli_runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "stage" in result.output
        assert "publish" in result.output

    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "releasebox v" in result.output


class TestTargetsCommand:
    """Test the targets command."""

    def test_targets_table(self, cli_runner, config_file):
        config_file({"project_name": "wasabi", "targets": WINDOWS_TARGETS})

        result = cli_runner.invoke(app, ["targets"])

        assert result.exit_code == 0, result.output
        assert "wasabi-windows-x64.exe" in result.output
        assert "wasabi-windows-arm64.exe" in result.output

    def test_duplicate_identifiers_are_reported(self, cli_runner, config_file):
        config_file(
            {
                "project_name": "wasabi",
                "targets": [
                    {"name": "x86_64-pc-windows-msvc", "arch": "x64"},
                    {"name": "x86_64-pc-windows-gnu", "arch": "x64"},
                ],
            }
        )

        result = cli_runner.invoke(app, ["targets"])

        assert result.exit_code == 0
        assert "more than one target" in result.output

    def test_no_targets(self, cli_runner, config_file):
        config_file({"project_name": "wasabi"})

        result = cli_runner.invoke(app, ["targets"])

        assert result.exit_code == 0
        assert "No targets configured" in result.output

    def test_missing_config(self, cli_runner):
        result = cli_runner.invoke(app, ["targets"])

        assert result.exit_code == 1

    def test_explicit_config_path(self, cli_runner, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(
            "project_name: wasabi\n"
            "targets:\n"
            "  - {name: x86_64-pc-windows-msvc, arch: x64}\n"
        )

        result = cli_runner.invoke(app, ["-c", str(path), "targets"])

        assert result.exit_code == 0, result.output
        assert "wasabi-windows-x64" in result.output


class TestStageCommand:
    """Test the stage command."""

    def test_stage_with_project_option(self, cli_runner, make_artifacts, tmp_path):
        root = make_artifacts(
            {
                "wasabi-windows-x64": {"wasabi.exe": "x64"},
                "wasabi-windows-arm64": {},
            }
        )
        output = tmp_path / "out"

        result = cli_runner.invoke(
            app, ["stage", str(root), str(output), "--project", "wasabi"]
        )

        assert result.exit_code == 0, result.output
        assert [p.name for p in output.iterdir()] == ["wasabi-windows-x64.exe"]
        assert "wasabi-windows-arm64" in result.output
        assert not (root / "wasabi-windows-x64" / "wasabi.exe").exists()

    def test_stage_copy(self, cli_runner, make_artifacts, tmp_path):
        root = make_artifacts({"wasabi-windows-x64": {"wasabi.exe": "x64"}})

        result = cli_runner.invoke(
            app,
            ["stage", str(root), str(tmp_path / "out"), "-p", "wasabi", "--copy"],
        )

        assert result.exit_code == 0, result.output
        assert (root / "wasabi-windows-x64" / "wasabi.exe").exists()

    def test_stage_uses_config_project(
        self, cli_runner, config_file, make_artifacts, tmp_path
    ):
        config_file({"project_name": "wasabi", "naming": {"mode": "copy"}})
        root = make_artifacts({"wasabi-windows-x64": {"wasabi.exe": "x64"}})
        output = tmp_path / "out"

        result = cli_runner.invoke(app, ["stage", str(root), str(output)])

        assert result.exit_code == 0, result.output
        assert (output / "wasabi-windows-x64.exe").read_text() == "x64"
        assert (root / "wasabi-windows-x64" / "wasabi.exe").exists()

    def test_stage_reject_policy(self, cli_runner, make_artifacts, tmp_path):
        root = make_artifacts({"wasabi-windows-x64": {"README.md": "docs"}})
        output = tmp_path / "out"

        result = cli_runner.invoke(
            app,
            [
                "stage",
                str(root),
                str(output),
                "-p",
                "wasabi",
                "--on-missing",
                "reject",
            ],
        )

        assert result.exit_code == 1
        assert not output.exists()

    def test_stage_collision_error_policy(self, cli_runner, make_artifacts, tmp_path):
        root = make_artifacts(
            {
                "wasabi-windows-x64": {
                    "debug/wasabi.exe": "debug",
                    "release/wasabi.exe": "release",
                }
            }
        )

        result = cli_runner.invoke(
            app,
            [
                "stage",
                str(root),
                str(tmp_path / "out"),
                "-p",
                "wasabi",
                "--on-collision",
                "error",
            ],
        )

        assert result.exit_code == 1

    def test_stage_non_empty_output(self, cli_runner, make_artifacts, tmp_path):
        root = make_artifacts({"wasabi-windows-x64": {"wasabi.exe": "x64"}})
        output = tmp_path / "out"
        output.mkdir()
        (output / "old.exe").write_text("old")

        failed = cli_runner.invoke(app, ["stage", str(root), str(output), "-p", "wasabi"])
        cleaned = cli_runner.invoke(
            app, ["stage", str(root), str(output), "-p", "wasabi", "--clean"]
        )

        assert failed.exit_code == 1
        assert cleaned.exit_code == 0, cleaned.output
        assert [p.name for p in output.iterdir()] == ["wasabi-windows-x64.exe"]

    def test_stage_missing_artifacts_dir(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            app,
            ["stage", str(tmp_path / "missing"), str(tmp_path / "out"), "-p", "wasabi"],
        )

        assert result.exit_code == 1

    def test_invalid_policy_value(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            app,
            [
                "stage",
                str(tmp_path),
                str(tmp_path / "out"),
                "-p",
                "wasabi",
                "--on-collision",
                "rename",
            ],
        )

        assert result.exit_code == 2


class TestPublishCommand:
    """Test the publish command."""

    @pytest.fixture(autouse=True)
    def _setup(self, tmp_path):
        self.output = tmp_path / "out"
        self.output.mkdir()
        (self.output / "wasabi-windows-x64.exe").write_text("x64")

    def test_dry_run(self, cli_runner, tmp_path):
        release_dir = tmp_path / "releases"

        result = cli_runner.invoke(
            app,
            [
                "publish",
                str(self.output),
                "--tag",
                "v1.0.0",
                "--dry-run",
                str(release_dir),
                "--body",
                "Notes",
            ],
        )

        assert result.exit_code == 0, result.output
        record = json.loads((release_dir / "v1.0.0" / "release.json").read_text())
        assert record["body"] == "Notes"
        assert record["draft"] is True
        assert record["assets"] == ["wasabi-windows-x64.exe"]

    def test_github_publish(self, cli_runner, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghs_token")
        monkeypatch.setenv("GITHUB_REPOSITORY", "owner/wasabi")
        publisher = Mock()
        publisher.publish.return_value = PublishResult(
            tag="v1.0.0", release_id=7, assets=["wasabi-windows-x64.exe"]
        )

        with patch(
            "releasebox.cli.commands.release.create_github_release_publisher",
            return_value=publisher,
        ) as factory:
            result = cli_runner.invoke(
                app, ["publish", str(self.output), "--tag", "v1.0.0"]
            )

        assert result.exit_code == 0, result.output
        factory.assert_called_once_with(
            "owner/wasabi", "ghs_token", api_url="https://api.github.com"
        )
        output_dir, record = publisher.publish.call_args.args
        assert output_dir == self.output
        assert record.tag == "v1.0.0"

    def test_github_publish_without_token(self, cli_runner, monkeypatch):
        monkeypatch.setenv("GITHUB_REPOSITORY", "owner/wasabi")

        result = cli_runner.invoke(app, ["publish", str(self.output), "--tag", "v1.0.0"])

        assert result.exit_code == 1

    def test_github_publish_without_repository(self, cli_runner, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghs_token")

        result = cli_runner.invoke(app, ["publish", str(self.output), "--tag", "v1.0.0"])

        assert result.exit_code == 1

    def test_missing_output_dir(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            app,
            [
                "publish",
                str(tmp_path / "missing"),
                "--tag",
                "v1.0.0",
                "--dry-run",
                str(tmp_path / "r"),
            ],
        )

        assert result.exit_code == 1


class TestRunCommand:
    """Test the run command with the build driver replaced."""

    @pytest.fixture(autouse=True)
    def _setup(self, config_file, fake_build_driver, tmp_path):
        config_file({"project_name": "wasabi", "targets": WINDOWS_TARGETS})
        self.driver = fake_build_driver()
        self.work_dir = tmp_path / "work"
        self.release_dir = tmp_path / "releases"

    def _invoke(self, cli_runner, *args):
        with patch(
            "releasebox.cli.commands.release.create_cargo_build_driver",
            return_value=self.driver,
        ):
            return cli_runner.invoke(
                app, ["run", "--work-dir", str(self.work_dir), *args]
            )

    def test_tag_dry_run(self, cli_runner):
        result = self._invoke(
            cli_runner, "--ref", "v1.2.0", "--dry-run", str(self.release_dir)
        )

        assert result.exit_code == 0, result.output
        assets = sorted(
            p.name for p in (self.release_dir / "v1.2.0" / "assets").iterdir()
        )
        assert assets == [
            "wasabi-windows-arm64.exe",
            "wasabi-windows-x64.exe",
            "wasabi-windows-x86.exe",
        ]

    def test_branch_push_rejected(self, cli_runner):
        result = self._invoke(cli_runner, "--ref", "refs/heads/main")

        assert result.exit_code == 1
        assert self.driver.built == []

    def test_manual_branch_run_stages_only(self, cli_runner):
        result = self._invoke(
            cli_runner,
            "--ref",
            "refs/heads/main",
            "--event",
            "workflow_dispatch",
            "--dry-run",
            str(self.release_dir),
        )

        assert result.exit_code == 0, result.output
        assert len(list((self.work_dir / "out").iterdir())) == 3
        assert not self.release_dir.exists()

    def test_manual_run_on_bare_branch_name(self, cli_runner):
        result = self._invoke(
            cli_runner,
            "--ref",
            "main",
            "--event",
            "workflow_dispatch",
            "--dry-run",
            str(self.release_dir),
        )

        assert result.exit_code == 0, result.output
        assert len(list((self.work_dir / "out").iterdir())) == 3
        assert not self.release_dir.exists()

    def test_trigger_from_environment(self, cli_runner, monkeypatch):
        monkeypatch.setenv("GITHUB_EVENT_NAME", "push")
        monkeypatch.setenv("GITHUB_REF", "refs/tags/v3.0.0")

        result = self._invoke(cli_runner, "--dry-run", str(self.release_dir))

        assert result.exit_code == 0, result.output
        assert (self.release_dir / "v3.0.0" / "release.json").exists()

    def test_tag_run_requires_github_credentials(self, cli_runner):
        result = self._invoke(cli_runner, "--ref", "v1.2.0")

        assert result.exit_code == 1
        assert self.driver.built == []

    def test_build_failure(self, cli_runner, fake_build_driver):
        self.driver = fake_build_driver(
            fail={"i686-pc-windows-msvc": BuildError("linker failed")}
        )

        result = self._invoke(
            cli_runner, "--ref", "v1.2.0", "--dry-run", str(self.release_dir)
        )

        assert result.exit_code == 1
        assert not self.release_dir.exists()
