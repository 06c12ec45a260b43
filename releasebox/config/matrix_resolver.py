"""Target matrix resolver following the GitHub Actions workflow pattern."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from releasebox.core.errors import ConfigError
from releasebox.models.target import Target


logger = logging.getLogger(__name__)

BUILD_JOB_PREFIX = "build-"


class TargetMatrixResolver:
    """Resolve build targets from config entries or a workflow file.

    A workflow job is read when it declares ``strategy.matrix.target`` as a
    list of ``{name, arch}`` mappings, the shape used by release workflows
    that build one binary per toolchain triple. Job names of the form
    ``build-<platform>`` supply the platform for their entries.
    """

    def __init__(self) -> None:
        """Initialize target matrix resolver."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def resolve_entries(
        self,
        entries: list[dict[str, Any]],
        default_platform: str | None = None,
        source: str = "config",
    ) -> list[Target]:
        """Validate raw matrix entries into targets.

        Args:
            entries: Raw ``{name, arch, platform?}`` mappings
            default_platform: Platform for entries that omit one
            source: Where the entries came from, used in error messages

        Returns:
            list[Target]: Targets in entry order

        Raises:
            ConfigError: If an entry is not a mapping or fails validation
        """
        targets: list[Target] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ConfigError(
                    f"Matrix entry {index} in {source} is not a mapping: {entry!r}",
                    {"source": source, "index": index},
                )
            data = dict(entry)
            if default_platform and not data.get("platform"):
                data["platform"] = default_platform
            try:
                targets.append(Target.model_validate(data))
            except ValidationError as e:
                raise ConfigError(
                    f"Invalid matrix entry {index} in {source}: {e}",
                    {"source": source, "index": index, "entry": entry},
                ) from e

        self.logger.debug("Resolved %d targets from %s", len(targets), source)
        return targets

    def resolve_from_workflow(
        self,
        workflow_path: Path,
        job: str | None = None,
        default_platform: str | None = None,
    ) -> list[Target]:
        """Read targets from ``jobs.<job>.strategy.matrix.target``.

        Args:
            workflow_path: Path to the workflow YAML file
            job: Only read this job; all jobs with a target matrix otherwise
            default_platform: Platform used when neither the entry nor the
                job name provides one

        Returns:
            list[Target]: Targets across the selected jobs, in file order

        Raises:
            ConfigError: If the file cannot be parsed or has no target matrix
        """
        workflow = self._load_yaml(workflow_path)
        jobs = workflow.get("jobs") or {}
        if not isinstance(jobs, dict):
            raise ConfigError(
                f"'jobs' in {workflow_path} must be a mapping",
                {"path": str(workflow_path)},
            )

        if job is not None and job not in jobs:
            raise ConfigError(
                f"Job '{job}' not found in {workflow_path}",
                {"path": str(workflow_path), "jobs": list(jobs)},
            )

        targets: list[Target] = []
        for job_name, job_config in jobs.items():
            if job is not None and job_name != job:
                continue
            entries = self._matrix_targets(job_config)
            if entries is None:
                continue
            platform = self._platform_from_job_name(job_name) or default_platform
            targets.extend(
                self.resolve_entries(
                    entries,
                    default_platform=platform,
                    source=f"{workflow_path.name}:{job_name}",
                )
            )

        if not targets:
            raise ConfigError(
                f"No target matrix found in {workflow_path}",
                {"path": str(workflow_path)},
            )

        self.logger.info(
            "Resolved %d targets from workflow %s", len(targets), workflow_path
        )
        return targets

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            msg = f"Failed to parse workflow {path}: {e}"
            self.logger.error(msg)
            raise ConfigError(msg, {"path": str(path)}) from e
        if not isinstance(data, dict):
            raise ConfigError(f"Workflow {path} must be a mapping", {"path": str(path)})
        return data

    def _matrix_targets(self, job_config: Any) -> list[dict[str, Any]] | None:
        if not isinstance(job_config, dict):
            return None
        matrix = (job_config.get("strategy") or {}).get("matrix") or {}
        if not isinstance(matrix, dict):
            return None
        entries = matrix.get("target")
        if not isinstance(entries, list):
            return None
        return entries

    def _platform_from_job_name(self, job_name: str) -> str | None:
        if job_name.startswith(BUILD_JOB_PREFIX) and len(job_name) > len(
            BUILD_JOB_PREFIX
        ):
            return job_name[len(BUILD_JOB_PREFIX) :]
        return None


def create_target_matrix_resolver() -> TargetMatrixResolver:
    """Create target matrix resolver instance.

    Returns:
        TargetMatrixResolver: New target matrix resolver
    """
    return TargetMatrixResolver()
