"""
GitHub operations — pull requests for the integration branch.

Goes through the GitHub CLI's REST passthrough (``gh api``). The token
is handed to ``gh`` via ``GH_TOKEN`` in the child environment.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitHubError(RuntimeError):
    """A GitHub API call failed."""


def run_gh(
    *args: str,
    token: str,
    cwd: Path | None = None,
    timeout: int = 30,
    stdin: str | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a gh CLI command and return the result."""
    logger.debug("$ gh %s", " ".join(args))
    return subprocess.run(
        ["gh", *args],
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        timeout=timeout,
        input=stdin,
        env={**os.environ, "GH_TOKEN": token, "GH_PROMPT_DISABLED": "1"},
    )


def _gh_api(
    method: str,
    endpoint: str,
    *args: str,
    token: str,
    timeout: int,
    stdin: str | None = None,
) -> object:
    """Call ``gh api`` and parse the JSON response, raising GitHubError on failure."""
    label = f"{method} {endpoint}"
    try:
        r = run_gh("api", "--method", method, endpoint, *args, token=token, timeout=timeout, stdin=stdin)
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise GitHubError(f"{label} failed: {e}") from e

    if r.returncode != 0:
        raise GitHubError(f"{label} failed: {r.stderr.strip() or r.returncode}")

    try:
        return json.loads(r.stdout or "null")
    except (json.JSONDecodeError, ValueError) as e:
        raise GitHubError(f"Unexpected response from {label}: {e}") from e


def open_pulls(owner: str, name: str, *, token: str, timeout: int = 30) -> list[dict]:
    """List open pull requests (first 100)."""
    pulls = _gh_api(
        "GET", f"repos/{owner}/{name}/pulls",
        "-f", "state=open", "-f", "per_page=100",
        token=token, timeout=timeout,
    )
    if not isinstance(pulls, list):
        raise GitHubError(f"Expected a list of pull requests for {owner}/{name}")
    return pulls


def get_pr(owner: str, name: str, branch: str, *, token: str, timeout: int = 30) -> bool:
    """Whether an open pull request has ``branch`` as its head ref."""
    for pr in open_pulls(owner, name, token=token, timeout=timeout):
        if (pr.get("head") or {}).get("ref") == branch:
            logger.debug("Open PR #%s found for %s", pr.get("number"), branch)
            return True
    return False


def create_pr(
    owner: str,
    name: str,
    *,
    head: str,
    base: str,
    body: str,
    token: str,
    timeout: int = 30,
) -> dict | None:
    """Open ``head`` → ``base`` unless an open PR from ``head`` exists.

    An existing PR is left as-is (title and body are not updated).

    Returns:
        The created pull request, or None if one was already open.
    """
    if get_pr(owner, name, head, token=token, timeout=timeout):
        logger.info("Pull request from %s already open on %s/%s", head, owner, name)
        return None

    payload = {
        "title": f"Update {name}",
        "head": head,
        "base": base,
        "body": body,
    }
    pr = _gh_api(
        "POST", f"repos/{owner}/{name}/pulls", "--input", "-",
        token=token, timeout=timeout, stdin=json.dumps(payload),
    )
    if not isinstance(pr, dict):
        raise GitHubError(f"Unexpected pull request payload from {owner}/{name}")

    logger.info("Opened pull request #%s on %s/%s", pr.get("number"), owner, name)
    return pr
