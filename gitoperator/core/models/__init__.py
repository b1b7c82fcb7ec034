"""
Domain models — Pydantic types for the git operator hook.

All models are re-exported here for convenient access:

    from gitoperator.core.models import GitContentSpec, FileSpec, BindingContext
"""

from gitoperator.core.models.binding import ApiObject, BindingContext, ObjectMetadata
from gitoperator.core.models.gitcontent import FileSpec, GitContentSpec
from gitoperator.core.models.status import ReconcileOutcome, StatusCondition

__all__ = [
    # binding.py
    "ApiObject",
    "BindingContext",
    # gitcontent.py
    "FileSpec",
    "GitContentSpec",
    "ObjectMetadata",
    # status.py
    "ReconcileOutcome",
    "StatusCondition",
]
