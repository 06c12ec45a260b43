"""Configuration: pipeline models, target matrix and runtime settings."""

from releasebox.config.matrix_resolver import (
    TargetMatrixResolver,
    create_target_matrix_resolver,
)
from releasebox.config.models import (
    BuildSettings,
    CollisionPolicy,
    MissingProjectNamePolicy,
    NamingSettings,
    PipelineConfig,
    ReleaseSettings,
    StagingMode,
)
from releasebox.config.user_config import (
    ReleaseboxSettings,
    create_settings,
    find_config_file,
    load_pipeline_config,
)


__all__ = [
    "BuildSettings",
    "CollisionPolicy",
    "MissingProjectNamePolicy",
    "NamingSettings",
    "PipelineConfig",
    "ReleaseSettings",
    "ReleaseboxSettings",
    "StagingMode",
    "TargetMatrixResolver",
    "create_settings",
    "create_target_matrix_resolver",
    "find_config_file",
    "load_pipeline_config",
]
