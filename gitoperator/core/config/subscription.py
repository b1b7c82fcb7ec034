"""
Hook subscription — the descriptor printed for ``--config``.

The host operator reads it once to register the watch; the
reconciliation engine never consults it.
"""

from __future__ import annotations

GITCONTENT_API_VERSION = "wingcloud.com/v1"
GITCONTENT_KIND = "GitContent"

WATCH_EVENTS = ("Added", "Modified", "Deleted")


def hook_config() -> dict:
    """Static subscription descriptor for the host operator."""
    return {
        "configVersion": "v1",
        "kubernetes": [
            {
                "apiVersion": GITCONTENT_API_VERSION,
                "kind": GITCONTENT_KIND,
                "executeHookOnEvent": list(WATCH_EVENTS),
            },
        ],
    }
