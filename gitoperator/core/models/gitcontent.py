"""
GitContent model — the declared file set for one GitHub repository.

A GitContent custom resource names a repository (owner/name) and the
files that must exist in it. This is read-only input to the reconciler.

Note on ``readOnly``: the flag is INVERTED relative to its usual meaning.

    readOnly=true   the hook owns the file and rewrites it on every run
                    whenever its content drifts from the declared content.
    readOnly=false  the file is seeded once; after it exists the user
                    owns it and the hook never touches it again.

The naming comes from the CRD and is kept as-is.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FileSpec(BaseModel):
    """One managed file, relative to the repository root.

    ``read_only`` (wire name ``readOnly``) selects the merge policy —
    see the module docstring for its inverted meaning.
    """

    model_config = ConfigDict(populate_by_name=True)

    path: str
    content: str
    read_only: bool = Field(default=False, alias="readOnly")


class GitContentSpec(BaseModel):
    """Target repository plus the ordered list of files to manage.

    Files are applied in declaration order. Paths are expected to be
    unique; if one repeats, the last declaration wins.
    """

    owner: str
    name: str
    files: list[FileSpec] = Field(default_factory=list)

    @property
    def slug(self) -> str:
        """GitHub ``owner/name`` slug."""
        return f"{self.owner}/{self.name}"

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> GitContentSpec:
        """Build from a GitContent API object.

        The fields are read from ``obj["spec"]`` when present, else from
        the top level of the object.
        """
        spec = obj.get("spec")
        if isinstance(spec, dict):
            return cls.model_validate(spec)
        return cls.model_validate(obj)
