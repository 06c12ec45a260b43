"""Run triggers: tag pushes and manual invocations."""

import fnmatch
import os
from collections.abc import Mapping
from enum import Enum

from pydantic import ConfigDict

from releasebox.core.errors import TriggerError
from releasebox.models.base import ReleaseboxBaseModel


TAG_REF_PREFIX = "refs/tags/"
BRANCH_REF_PREFIX = "refs/heads/"


class TriggerEvent(str, Enum):
    """Events that may start a run."""

    PUSH = "push"
    MANUAL = "workflow_dispatch"


class Trigger(ReleaseboxBaseModel):
    """What started the run: an event and the git ref it ran on.

    A push must be a tag matching the tag pattern. A manual run may happen
    on any ref, but only a run on a tag ref may publish a release.
    """

    model_config = ConfigDict(frozen=True)

    event: TriggerEvent
    ref: str = ""

    @classmethod
    def from_ref(
        cls, ref: str, event: TriggerEvent | str = TriggerEvent.PUSH
    ) -> "Trigger":
        """Build a trigger from a full or bare ref.

        A bare name is a tag for a push and a branch for a manual run.
        """
        try:
            trigger_event = TriggerEvent(event)
        except ValueError as e:
            raise TriggerError(
                f"Unsupported trigger event: {event!r}", {"event": str(event)}
            ) from e
        if ref and not ref.startswith("refs/"):
            if trigger_event == TriggerEvent.PUSH:
                prefix = TAG_REF_PREFIX
            else:
                prefix = BRANCH_REF_PREFIX
            ref = f"{prefix}{ref}"
        return cls(event=trigger_event, ref=ref)

    @classmethod
    def from_environment(cls, env: Mapping[str, str] | None = None) -> "Trigger":
        """Read ``GITHUB_EVENT_NAME`` and ``GITHUB_REF``.

        Without an event name the run is treated as manual.
        """
        env = os.environ if env is None else env
        event = env.get("GITHUB_EVENT_NAME") or TriggerEvent.MANUAL.value
        ref = env.get("GITHUB_REF", "")
        try:
            return cls(event=TriggerEvent(event), ref=ref)
        except ValueError as e:
            raise TriggerError(
                f"Unsupported trigger event: {event!r}", {"event": event, "ref": ref}
            ) from e

    @property
    def is_tag(self) -> bool:
        return self.ref.startswith(TAG_REF_PREFIX) and len(self.ref) > len(
            TAG_REF_PREFIX
        )

    @property
    def tag(self) -> str | None:
        return self.ref[len(TAG_REF_PREFIX) :] if self.is_tag else None

    def matches(self, tag_pattern: str) -> bool:
        """True when the ref is a tag matching ``tag_pattern``."""
        return self.tag is not None and fnmatch.fnmatchcase(self.tag, tag_pattern)

    def validate_for(self, tag_pattern: str) -> None:
        """Reject runs the pipeline must not start.

        Raises:
            TriggerError: If a push is not a tag matching ``tag_pattern``
        """
        if self.event == TriggerEvent.PUSH and not self.matches(tag_pattern):
            raise TriggerError(
                f"Push to '{self.ref}' does not match tag pattern '{tag_pattern}'",
                {"ref": self.ref, "tag_pattern": tag_pattern},
            )

    def should_publish(self, tag_pattern: str) -> bool:
        """Only runs on a tag ref publish; manual runs on branches stop after staging."""
        if self.event == TriggerEvent.PUSH:
            return self.matches(tag_pattern)
        return self.is_tag


__all__ = ["BRANCH_REF_PREFIX", "TAG_REF_PREFIX", "Trigger", "TriggerEvent"]
