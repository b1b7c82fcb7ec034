"""K8s status reporting — patch the Ready condition onto a custom resource.

Best-effort: a failed patch is logged at DEBUG and otherwise ignored.
The reconciliation it reports on has already succeeded by then.
"""

from __future__ import annotations

import json
import logging

from gitoperator.core.models.binding import ApiObject
from gitoperator.core.models.status import StatusCondition
from gitoperator.core.services.k8s_common import (
    DEFAULT_NAMESPACE,
    _run_kubectl,
    resource_type,
)

logger = logging.getLogger(__name__)


def status_patch(condition: StatusCondition) -> dict:
    """Merge patch that replaces ``status.conditions`` wholesale."""
    return {"status": {"conditions": [condition.model_dump()]}}


def patch_status(
    obj: ApiObject,
    condition: StatusCondition,
    *,
    default_namespace: str = DEFAULT_NAMESPACE,
    timeout: int = 15,
) -> bool:
    """Patch the status sub-resource of ``obj``.

    Returns:
        True if kubectl accepted the patch. Never raises.
    """
    rtype = resource_type(obj.apiVersion, obj.kind)
    namespace = obj.metadata.namespace or default_namespace
    try:
        r = _run_kubectl(
            "patch", rtype, obj.metadata.name,
            "-n", namespace,
            "--subresource", "status",
            "--type", "merge",
            "-p", json.dumps(status_patch(condition)),
            timeout=timeout,
        )
    except Exception as e:
        logger.debug("Status patch for %s/%s not applied: %s", namespace, obj.metadata.name, e)
        return False

    if r.returncode != 0:
        logger.debug(
            "Status patch for %s/%s failed: %s",
            namespace, obj.metadata.name, r.stderr.strip(),
        )
        return False

    logger.info(
        "Status of %s %s/%s: Ready=%s (%s)",
        rtype, namespace, obj.metadata.name, condition.status, condition.message,
    )
    return True


def set_ready(
    obj: ApiObject,
    ready: bool,
    message: str,
    *,
    default_namespace: str = DEFAULT_NAMESPACE,
    timeout: int = 15,
) -> bool:
    """Write a fresh Ready condition onto ``obj``."""
    return patch_status(
        obj,
        StatusCondition.ready(ready, message),
        default_namespace=default_namespace,
        timeout=timeout,
    )
