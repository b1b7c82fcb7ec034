"""
GitContent reconciliation — the end-to-end run for one resource.

    checkout → ensure_branch → reconcile_files
        changed:    commit_and_push → create_pr → Ready=True  "In progress"
        unchanged:  get_pr → (no open PR) Ready=False "Synced"

Each step completes before the next starts. Any git or GitHub failure
propagates to the caller; only the status patch is best-effort.
"""

from __future__ import annotations

import logging

from gitoperator.core.config.loader import HookConfig
from gitoperator.core.models.binding import ApiObject
from gitoperator.core.models.gitcontent import GitContentSpec
from gitoperator.core.models.status import ReconcileOutcome
from gitoperator.core.services.file_reconcile import reconcile_files
from gitoperator.core.services.git_gh_ops import create_pr, get_pr
from gitoperator.core.services.git_ops import (
    checkout,
    commit_and_push,
    configure_identity,
    ensure_branch,
)
from gitoperator.core.services.k8s_status import set_ready

logger = logging.getLogger(__name__)

MSG_IN_PROGRESS = "In progress"
MSG_SYNCED = "Synced"


def reconcile_git_content(
    spec: GitContentSpec,
    config: HookConfig,
    obj: ApiObject | None = None,
) -> ReconcileOutcome:
    """Bring ``spec.owner/spec.name`` in line with the declared files.

    Args:
        spec: Target repository and files.
        config: Hook configuration (token, branch name, bot identity...).
        obj: The custom resource to report status on. None skips reporting.

    Returns:
        Whether anything changed and whether a PR is open afterwards.

    Raises:
        GitError: Clone, branch, commit or push failed.
        GitHubError: Listing or creating the pull request failed.
        ValueError: A file path escapes the repository.
    """
    settings = config.settings
    token = config.github_token
    outcome = ReconcileOutcome()

    logger.info("Reconciling %s (%d files)", spec.slug, len(spec.files))

    with checkout(
        spec.owner, spec.name, token,
        base_url=settings.git_base_url, timeout=settings.git_timeout,
    ) as wc:
        configure_identity(wc, settings.bot_name, settings.bot_email)
        ensure_branch(wc, settings.branch, settings.merge_message)

        outcome.changed = reconcile_files(spec.files, wc.root)

        if outcome.changed:
            commit_and_push(wc, settings.branch, settings.commit_message)
            create_pr(
                spec.owner, spec.name,
                head=settings.branch,
                base=wc.default_branch,
                body=settings.pr_body,
                token=token,
                timeout=settings.gh_timeout,
            )
            outcome.pr_exists = True
        else:
            logger.info("%s is up to date", spec.slug)
            outcome.pr_exists = get_pr(
                spec.owner, spec.name, settings.branch,
                token=token, timeout=settings.gh_timeout,
            )

    if obj is not None:
        report_outcome(obj, outcome, config)
    return outcome


def report_outcome(obj: ApiObject, outcome: ReconcileOutcome, config: HookConfig) -> None:
    """Translate an outcome into a Ready condition.

    An unchanged run with a PR still open leaves the status alone; the
    run that opened the PR already marked the resource Ready.
    """
    settings = config.settings
    if outcome.changed:
        ready, message = True, MSG_IN_PROGRESS
    elif not outcome.pr_exists:
        ready, message = False, MSG_SYNCED
    else:
        logger.debug("PR still open for %s, status unchanged", obj.metadata.name)
        return

    set_ready(
        obj, ready, message,
        default_namespace=settings.default_namespace,
        timeout=settings.kubectl_timeout,
    )
