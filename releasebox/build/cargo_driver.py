"""Cargo build driver: one release binary per target triple."""

import logging
import subprocess
from pathlib import Path

from releasebox.core.errors import BuildError
from releasebox.models.target import BuiltArtifact, Target
from releasebox.utils import stream_process
from releasebox.utils.stream_process import OutputMiddleware


logger = logging.getLogger(__name__)

# Lines of compiler output kept for error messages
ERROR_TAIL_LINES = 20


class LoggerOutputMiddleware(OutputMiddleware[str]):
    """Forward build output to the logger, prefixed with the target triple.

    Cargo reports progress on stderr, so both streams log at debug level.
    """

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def process(self, line: str, stream_type: str) -> str:
        logger.debug("%s%s", self.prefix, line)
        return line


class CargoBuildDriver:
    """Build the project with ``cargo build --release --target <triple>``.

    The binary is expected at ``target/<triple>/release/<binary>``, with an
    ``.exe`` suffix on Windows targets.
    """

    def __init__(
        self,
        project_name: str,
        project_dir: Path = Path("."),
        toolchain: str | None = "nightly",
        binary_name: str | None = None,
        cargo: str = "cargo",
    ) -> None:
        self.project_name = project_name
        self.project_dir = project_dir
        self.toolchain = toolchain
        self.binary_name = binary_name or project_name
        self.cargo = cargo

    def build_command(self, target: Target) -> list[str]:
        cmd = [self.cargo]
        if self.toolchain:
            cmd.append(f"+{self.toolchain}")
        cmd.extend(["build", "--release", "--target", target.name])
        return cmd

    def output_path(self, target: Target) -> Path:
        binary = f"{self.binary_name}.exe" if target.is_windows else self.binary_name
        return self.project_dir / "target" / target.name / "release" / binary

    def build(self, target: Target) -> BuiltArtifact:
        """Compile one target and return its binary.

        Raises:
            BuildError: If cargo is missing, exits non-zero, or leaves no binary
        """
        cmd = self.build_command(target)
        cmd_str = " ".join(cmd)
        context = {"target": target.name, "arch": target.arch, "command": cmd_str}
        logger.info("Building %s: %s", target, cmd_str)

        try:
            return_code, _stdout, stderr = stream_process.run_command(
                cmd,
                LoggerOutputMiddleware(prefix=f"[{target.name}] "),
                cwd=self.project_dir,
            )
        except FileNotFoundError as e:
            logger.error("Cargo executable not found: %s", e)
            raise BuildError(f"Cargo executable not found: {e}", context) from e
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("Cargo subprocess error: %s", e)
            raise BuildError(f"Cargo subprocess error: {e}", context) from e

        if return_code != 0:
            tail = "\n".join(stderr[-ERROR_TAIL_LINES:])
            logger.error("Build failed for %s with exit code %d", target, return_code)
            raise BuildError(
                f"Build failed for {target.name} (exit code {return_code})"
                + (f":\n{tail}" if tail else ""),
                {**context, "return_code": return_code},
            )

        path = self.output_path(target)
        if not path.is_file():
            logger.error("Expected binary not found: %s", path)
            raise BuildError(
                f"Expected binary not found after build: {path}",
                {**context, "path": str(path)},
            )

        logger.info("Built %s -> %s", target, path)
        return BuiltArtifact(
            target=target,
            artifact_name=target.artifact_identifier(self.project_name),
            path=path.resolve(),
        )


def create_cargo_build_driver(
    project_name: str,
    project_dir: Path = Path("."),
    toolchain: str | None = "nightly",
    binary_name: str | None = None,
) -> CargoBuildDriver:
    """Create a cargo build driver instance."""
    return CargoBuildDriver(
        project_name,
        project_dir=project_dir,
        toolchain=toolchain,
        binary_name=binary_name,
    )
