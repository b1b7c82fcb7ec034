"""
K8s shared helpers — kubectl runner and resource naming.

Imported by k8s_status. Must NOT import from any sibling k8s_* module
to avoid circular imports.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)


DEFAULT_NAMESPACE = "default"


def _run_kubectl(
    *args: str,
    timeout: int = 15,
) -> subprocess.CompletedProcess[str]:
    """Run a kubectl command and return the result."""
    logger.debug("$ kubectl %s", " ".join(args))
    return subprocess.run(
        ["kubectl", *args],
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def api_group(api_version: str) -> str:
    """``wingcloud.com/v1`` → ``wingcloud.com``; core ``v1`` → ``""``."""
    if "/" in api_version:
        return api_version.split("/", 1)[0]
    return ""


def resource_type(api_version: str, kind: str) -> str:
    """kubectl resource type for a kind: ``gitcontent.wingcloud.com``."""
    group = api_group(api_version)
    singular = kind.lower()
    return f"{singular}.{group}" if group else singular
