"""
Git operations — working copy, integration branch, commit and push.

Everything runs through the git CLI in a private temporary clone:

    clone_repo / checkout   fresh clone of owner/name into a unique temp dir
    ensure_branch           integration branch exists and tracks the default branch
    commit_and_push         stage everything, commit as the bot, force-push

All failures raise ``GitError``. A failed run leaves nothing behind on the
remote: pushes only happen after every local step succeeded.
"""

from __future__ import annotations

import enum
import logging
import os
import shutil
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

GITHUB_URL = "https://github.com"

# Username sentinel for token auth over HTTPS
TOKEN_USER = "oauth2"

_REDACTED = "***"


class GitError(RuntimeError):
    """A git command failed."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr or f"exit code {returncode}"
        super().__init__(f"git {command} failed: {detail}")


class MergeConflictError(GitError):
    """Merging the default branch into the integration branch failed."""


class BranchState(enum.Enum):
    EXISTS = "exists"
    MISSING = "missing"


# ═══════════════════════════════════════════════════════════════════
#  Low-level runner
# ═══════════════════════════════════════════════════════════════════


def run_git(
    *args: str,
    cwd: Path,
    env: dict[str, str] | None = None,
    timeout: int = 300,
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result.

    ``env`` is layered over the inherited environment. Prompts are
    disabled so a bad credential fails instead of hanging.
    """
    child_env = {**os.environ, "GIT_TERMINAL_PROMPT": "0", **(env or {})}
    logger.debug("$ git %s (cwd=%s)", " ".join(args), cwd)
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout,
        env=child_env,
    )


def redact(text: str, *secrets: str) -> str:
    """Replace every non-empty secret in ``text``."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, _REDACTED)
    return text


def _checked(
    *args: str,
    cwd: Path,
    env: dict[str, str] | None = None,
    timeout: int = 300,
    secrets: tuple[str, ...] = (),
) -> str:
    """Run git, raise GitError on failure, return stdout."""
    try:
        result = run_git(*args, cwd=cwd, env=env, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise GitError(args[0], -1, f"timed out after {timeout}s") from e
    if result.returncode != 0:
        raise GitError(args[0], result.returncode, redact(result.stderr.strip(), *secrets))
    return result.stdout


# ═══════════════════════════════════════════════════════════════════
#  Credentials
# ═══════════════════════════════════════════════════════════════════


def authenticated_base(base_url: str, token: str) -> str:
    """``https://host`` → ``https://oauth2:<token>@host``."""
    scheme, rest = base_url.rstrip("/").split("://", 1)
    return f"{scheme}://{TOKEN_USER}:{token}@{rest}"


def remote_url(owner: str, name: str, base_url: str = GITHUB_URL) -> str:
    """Plain (credential-free) clone URL."""
    return f"{base_url.rstrip('/')}/{owner}/{name}.git"


def credential_env(base_url: str, token: str) -> dict[str, str]:
    """Git env that rewrites ``base_url`` to its token-bearing form.

    Uses git's ``GIT_CONFIG_COUNT`` / ``GIT_CONFIG_KEY_n`` variables so the
    token never appears in a command line. Only HTTPS remotes carry a token.
    """
    if not token or not base_url.startswith("https://"):
        return {}
    base = base_url.rstrip("/")
    return {
        "GIT_CONFIG_COUNT": "1",
        "GIT_CONFIG_KEY_0": f"url.{authenticated_base(base, token)}/.insteadOf",
        "GIT_CONFIG_VALUE_0": f"{base}/",
    }


# ═══════════════════════════════════════════════════════════════════
#  Working copy
# ═══════════════════════════════════════════════════════════════════


@dataclass
class WorkingCopy:
    """A private clone owned by exactly one reconciliation run."""

    root: Path
    tmpdir: Path
    default_branch: str
    env: dict[str, str] = field(default_factory=dict)
    token: str = field(default="", repr=False)
    timeout: int = 300

    def git(self, *args: str) -> str:
        """Run a git command in the clone, raising GitError on failure."""
        return _checked(
            *args, cwd=self.root, env=self.env,
            timeout=self.timeout, secrets=(self.token,),
        )

    def run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a git command in the clone and return the raw result."""
        return run_git(*args, cwd=self.root, env=self.env, timeout=self.timeout)

    def cleanup(self) -> None:
        shutil.rmtree(self.tmpdir, ignore_errors=True)


def clone_repo(
    owner: str,
    name: str,
    token: str,
    *,
    base_url: str = GITHUB_URL,
    timeout: int = 300,
) -> WorkingCopy:
    """Clone owner/name into a fresh, uniquely named temp directory.

    Raises:
        GitError: Clone failed (network, credentials, missing repo) or
            the default branch could not be determined. The temp
            directory is removed before raising.
    """
    tmpdir = Path(tempfile.mkdtemp(prefix=f"git-{owner}-{name}-"))
    root = tmpdir / name
    env = credential_env(base_url, token)

    logger.info("Cloning %s/%s into %s", owner, name, tmpdir)
    try:
        _checked(
            "clone", remote_url(owner, name, base_url), str(root),
            cwd=tmpdir, env=env, timeout=timeout, secrets=(token,),
        )
        default = _default_branch(root, env, timeout)
    except BaseException:
        shutil.rmtree(tmpdir, ignore_errors=True)
        raise

    logger.debug("Default branch of %s/%s is %s", owner, name, default)
    return WorkingCopy(
        root=root, tmpdir=tmpdir, default_branch=default,
        env=env, token=token, timeout=timeout,
    )


@contextmanager
def checkout(
    owner: str,
    name: str,
    token: str,
    *,
    base_url: str = GITHUB_URL,
    timeout: int = 300,
) -> Iterator[WorkingCopy]:
    """Clone for the duration of a ``with`` block, then delete the clone."""
    wc = clone_repo(owner, name, token, base_url=base_url, timeout=timeout)
    try:
        yield wc
    finally:
        wc.cleanup()


def _default_branch(root: Path, env: dict[str, str], timeout: int) -> str:
    """Default branch as advertised by origin, else the checked-out branch."""
    r = run_git("symbolic-ref", "--short", "refs/remotes/origin/HEAD", cwd=root, env=env, timeout=timeout)
    if r.returncode == 0 and r.stdout.strip():
        return r.stdout.strip().removeprefix("origin/")

    branch = _checked("rev-parse", "--abbrev-ref", "HEAD", cwd=root, env=env, timeout=timeout).strip()
    if not branch or branch == "HEAD":
        raise GitError("rev-parse", 1, "cannot determine default branch (empty repository?)")
    return branch


def configure_identity(wc: WorkingCopy, name: str, email: str) -> None:
    """Set the committer identity for this clone only."""
    wc.git("config", "user.name", name)
    wc.git("config", "user.email", email)


# ═══════════════════════════════════════════════════════════════════
#  Integration branch
# ═══════════════════════════════════════════════════════════════════


def branch_state(wc: WorkingCopy, branch: str) -> BranchState:
    """Whether ``branch`` exists on origin, as seen by the fresh clone.

    Raises:
        GitError: The lookup itself failed (anything but "not found").
    """
    r = wc.run("rev-parse", "--verify", "--quiet", f"refs/remotes/origin/{branch}")
    if r.returncode == 0:
        return BranchState.EXISTS
    if r.returncode == 1:
        return BranchState.MISSING
    raise GitError("rev-parse", r.returncode, redact(r.stderr.strip(), wc.token))


def ensure_branch(wc: WorkingCopy, branch: str, merge_message: str) -> BranchState:
    """Check out the integration branch, creating or updating it.

    Existing branch: checked out, then the default branch is merged in.
    Missing branch: created from the default branch's tip.

    Returns:
        The state the branch was found in.

    Raises:
        MergeConflictError: The merge did not complete. It is aborted
            first so the clone is left clean.
        GitError: Any other git failure.
    """
    state = branch_state(wc, branch)

    if state is BranchState.MISSING:
        logger.info("Creating branch %s from %s", branch, wc.default_branch)
        wc.git("checkout", "--no-track", "-b", branch, f"origin/{wc.default_branch}")
        return state

    logger.info("Updating branch %s from %s", branch, wc.default_branch)
    wc.git("checkout", "--track", f"origin/{branch}")

    r = wc.run("merge", "--no-edit", "-m", merge_message, f"origin/{wc.default_branch}")
    if r.returncode != 0:
        wc.run("merge", "--abort")
        detail = redact((r.stdout + r.stderr).strip(), wc.token)
        raise MergeConflictError("merge", r.returncode, detail)
    return state


# ═══════════════════════════════════════════════════════════════════
#  Commit & push
# ═══════════════════════════════════════════════════════════════════


def commit_all(wc: WorkingCopy, message: str) -> str | None:
    """Stage everything and commit.

    Returns:
        The new commit hash, or None when nothing was staged.
    """
    wc.git("add", ".")

    if wc.run("diff", "--cached", "--quiet").returncode == 0:
        logger.info("Nothing staged, skipping commit")
        return None

    wc.git("commit", "-m", message)
    return wc.git("rev-parse", "HEAD").strip()


def push_branch(wc: WorkingCopy, branch: str) -> None:
    """Force-push ``branch`` to origin and set upstream tracking.

    There is no lock around this: two overlapping runs for the same
    repository race, and the later push wins.
    """
    logger.info("Pushing %s", branch)
    wc.git("push", "--force", "--set-upstream", "origin", branch)


def commit_and_push(wc: WorkingCopy, branch: str, message: str) -> str | None:
    """Commit all changes on the current branch and force-push it."""
    sha = commit_all(wc, message)
    push_branch(wc, branch)
    return sha
