"""Base model for all releasebox Pydantic models.

This module provides a base model class that enforces consistent serialization
behavior across all releasebox models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ReleaseboxBaseModel(BaseModel):
    """Base model class for all releasebox Pydantic models.

    Serialization goes through ``to_dict`` so every model dumps with
    aliases and JSON-compatible values.
    """

    model_config = ConfigDict(
        # Strip whitespace from string fields
        str_strip_whitespace=True,
        # Use enum values in serialization
        use_enum_values=True,
        # Validate assignment after model creation
        validate_assignment=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary with consistent serialization parameters.

        Returns:
            Dictionary representation using JSON-compatible serialization
        """
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")

    def to_dict_full(self) -> dict[str, Any]:
        """Convert model to dictionary including all fields (even unset ones).

        Returns:
            Dictionary representation including all fields
        """
        return self.model_dump(by_alias=True, exclude_unset=False, mode="json")
