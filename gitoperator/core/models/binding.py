"""
Binding context models — the watch events delivered by the host operator.

The host writes a JSON array of binding contexts to a file and runs the
hook once per batch. Each element carries either a single ``object`` or,
for grouped deliveries, a list of ``objects``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ObjectMetadata(BaseModel):
    """Subset of Kubernetes object metadata the hook reads."""

    model_config = ConfigDict(extra="allow")

    name: str
    namespace: str | None = None
    uid: str | None = None
    creationTimestamp: str | None = None
    generation: int | None = None
    resourceVersion: str | None = None
    annotations: dict[str, str] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)


class ApiObject(BaseModel):
    """A Kubernetes API object as delivered in a binding context.

    Unknown top-level fields (``spec`` and friends) are preserved so the
    raw object can be handed to the resource-specific reconciler.
    """

    model_config = ConfigDict(extra="allow")

    apiVersion: str
    kind: str
    metadata: ObjectMetadata
    status: Any = None

    def is_kind(self, api_version: str, kind: str) -> bool:
        return self.apiVersion == api_version and self.kind == kind

    def raw(self) -> dict[str, Any]:
        """The object as a plain dict, including extra fields."""
        return self.model_dump(mode="json", exclude_none=True)


class BindingContext(BaseModel):
    """One watch event for one object."""

    model_config = ConfigDict(extra="allow")

    watchEvent: str | None = None
    type: str | None = None
    object: ApiObject
