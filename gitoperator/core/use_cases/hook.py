"""
Hook use case — read a binding-context batch and dispatch its events.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gitoperator.core.config.loader import ConfigError, HookConfig
from gitoperator.core.config.subscription import GITCONTENT_API_VERSION, GITCONTENT_KIND
from gitoperator.core.models.binding import BindingContext
from gitoperator.core.models.gitcontent import GitContentSpec
from gitoperator.core.models.status import ReconcileOutcome
from gitoperator.core.services.reconcile import reconcile_git_content

logger = logging.getLogger(__name__)

_EVENT_EMOJI = {
    "Added": "🌟",
    "Deleted": "🗑️",
    "Modified": "✏️",
}


@dataclass
class HookResult:
    """What one hook invocation processed."""

    events: int = 0
    reconciled: int = 0
    ignored: int = 0
    outcomes: list[ReconcileOutcome] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "events": self.events,
            "reconciled": self.reconciled,
            "ignored": self.ignored,
            "changed": sum(1 for o in self.outcomes if o.changed),
        }


def extract_events(context: list[dict[str, Any]]) -> list[BindingContext]:
    """Flatten a binding-context batch into one entry per object.

    Grouped entries (``objects: [...]``) inherit ``watchEvent`` and
    ``type`` from their parent. Entries with neither ``object`` nor
    ``objects`` are dropped.
    """
    results: list[BindingContext] = []
    for ctx in context:
        if "objects" in ctx:
            for item in ctx["objects"] or []:
                merged = {**item, "type": ctx.get("type"), "watchEvent": ctx.get("watchEvent")}
                results.append(BindingContext.model_validate(merged))
        elif "object" in ctx:
            results.append(BindingContext.model_validate(ctx))
    return results


def load_binding_context(path: Path) -> list[BindingContext]:
    """Read and flatten the binding-context file.

    Raises:
        ConfigError: File missing, unreadable, or not a JSON array.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read binding context {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in binding context {path}: {e}") from e

    if not isinstance(data, list):
        raise ConfigError(f"Expected a JSON array in {path}, got {type(data).__name__}")

    return extract_events(data)


def describe(event: BindingContext) -> str:
    """One-line event summary, e.g. ``🌟 Added: *wingcloud.com/v1/GitContent* default/site``."""
    obj = event.object
    emoji = _EVENT_EMOJI.get(event.watchEvent or "", "•")
    name = f"*{obj.apiVersion}/{obj.kind}* {obj.metadata.namespace or 'Default'}/{obj.metadata.name}"
    return f"{emoji} {event.watchEvent}: {name} (uid={obj.metadata.uid})"


def dispatch_events(events: list[BindingContext], config: HookConfig) -> HookResult:
    """Process events strictly in order. The first failure propagates."""
    result = HookResult(events=len(events))

    for event in events:
        logger.info(describe(event))
        obj = event.object

        if not obj.is_kind(GITCONTENT_API_VERSION, GITCONTENT_KIND):
            result.ignored += 1
            continue

        spec = GitContentSpec.from_object(obj.raw())
        result.outcomes.append(reconcile_git_content(spec, config, obj))
        result.reconciled += 1

    return result


def run_hook(config: HookConfig) -> HookResult:
    """Load the batch named by the config and dispatch it."""
    path = config.require_binding_context()
    events = load_binding_context(path)
    logger.debug("Loaded %d events from %s", len(events), path)
    return dispatch_events(events, config)
