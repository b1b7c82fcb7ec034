"""
Status models — reconciliation outcome and the Ready condition.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ReconcileOutcome(BaseModel):
    """What one reconciliation run did to the target repository."""

    changed: bool = False
    pr_exists: bool = False


class StatusCondition(BaseModel):
    """A status condition as stored on the custom resource.

    The hook writes exactly one condition (``Ready``) and replaces the
    whole ``conditions`` list on every patch.
    """

    type: str = "Ready"
    status: Literal["True", "False"]
    lastTransitionTime: str = Field(default_factory=_now_iso)
    lastProbeTime: str = Field(default_factory=_now_iso)
    message: str = ""

    @classmethod
    def ready(cls, ready: bool, message: str) -> StatusCondition:
        """Build a Ready condition with both timestamps set to now."""
        now = _now_iso()
        return cls(
            status="True" if ready else "False",
            lastTransitionTime=now,
            lastProbeTime=now,
            message=message,
        )
