"""Core test fixtures for the releasebox project."""

import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import Mock

import pytest
import structlog
import yaml
from typer.testing import CliRunner

from releasebox.config.models import PipelineConfig
from releasebox.models.target import BuiltArtifact, Target
from releasebox.protocols import FileAdapterProtocol


WASABI_TARGETS = [
    {"name": "x86_64-pc-windows-msvc", "arch": "x64"},
    {"name": "i686-pc-windows-msvc", "arch": "x86"},
    {"name": "aarch64-pc-windows-msvc", "arch": "arm64"},
]


# ---- Base Fixtures ----


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def mock_file_adapter() -> Mock:
    """Create a mock file adapter for testing."""
    adapter = Mock(spec=FileAdapterProtocol)
    return adapter


# ---- Test Isolation Fixtures ----


@pytest.fixture(autouse=True)
def isolated_env(
    tmp_path: Path,
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[Path, None, None]:
    """Run every test in an empty directory with no CI or user configuration.

    GitHub Actions variables and ``RELEASEBOX_*`` settings from the host are
    removed, the XDG config directory points into ``tmp_path`` and the
    working directory is a fresh ``workspace`` directory.
    """
    for name in list(os.environ):
        if name.startswith(("GITHUB_", "RELEASEBOX_")):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    workspace = tmp_path_factory.mktemp("workspace")
    monkeypatch.chdir(workspace)

    yield workspace

    # CLI tests install handlers bound to the runner's streams
    logging.getLogger().handlers = []
    structlog.reset_defaults()


# ---- Domain Fixtures ----


@pytest.fixture
def wasabi_config() -> PipelineConfig:
    """Pipeline configuration for the three Windows targets of ``wasabi``."""
    return PipelineConfig.model_validate(
        {"project_name": "wasabi", "targets": WASABI_TARGETS}
    )


@pytest.fixture
def windows_x64() -> Target:
    return Target(name="x86_64-pc-windows-msvc", arch="x64")


@pytest.fixture
def make_artifacts(tmp_path: Path) -> Callable[[dict[str, dict[str, str]]], Path]:
    """Factory laying out an artifact download root.

    Takes ``{artifact identifier: {relative file path: content}}``; an empty
    inner mapping creates an empty artifact directory.
    """

    def _make(layout: dict[str, dict[str, str]], root_name: str = "artifacts") -> Path:
        root = tmp_path / root_name
        root.mkdir(parents=True, exist_ok=True)
        for identifier, files in layout.items():
            artifact_dir = root / identifier
            artifact_dir.mkdir(parents=True, exist_ok=True)
            for relative, content in files.items():
                path = artifact_dir / relative
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content)
        return root

    return _make


@pytest.fixture
def config_file(isolated_env: Path) -> Callable[[dict[str, object]], Path]:
    """Factory writing ``releasebox.yaml`` into the working directory."""

    def _write(data: dict[str, object], name: str = "releasebox.yaml") -> Path:
        path = isolated_env / name
        path.write_text(yaml.safe_dump(data))
        return path

    return _write


class FakeBuildDriver:
    """Build driver that writes a binary per target without compiling anything.

    Targets whose triple is in ``fail`` raise the given exception.
    """

    def __init__(
        self,
        project_name: str,
        out_dir: Path,
        fail: dict[str, Exception] | None = None,
        binary_name: str | None = None,
    ) -> None:
        self.project_name = project_name
        self.binary_name = binary_name or project_name
        self.out_dir = out_dir
        self.fail = fail or {}
        self.built: list[str] = []

    def build(self, target: Target) -> BuiltArtifact:
        if target.name in self.fail:
            raise self.fail[target.name]
        binary = self.binary_name + (".exe" if target.is_windows else "")
        path = self.out_dir / target.name / "release" / binary
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"binary for {target.name}")
        self.built.append(target.name)
        return BuiltArtifact(
            target=target,
            artifact_name=target.artifact_identifier(self.project_name),
            path=path,
        )


@pytest.fixture
def fake_build_driver(tmp_path: Path) -> Callable[..., FakeBuildDriver]:
    def _make(
        project_name: str = "wasabi",
        fail: dict[str, Exception] | None = None,
        binary_name: str | None = None,
    ) -> FakeBuildDriver:
        return FakeBuildDriver(
            project_name, tmp_path / "cargo-target", fail=fail, binary_name=binary_name
        )

    return _make
