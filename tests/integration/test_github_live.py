"""
Live reconciliation against a real GitHub repository.

Needs GITHUB_TOKEN plus GITOP_TEST_OWNER / GITOP_TEST_REPO naming a
scratch repository the token may push to. Skipped otherwise.
"""

import os

import pytest

from gitoperator.core.config.loader import HookConfig
from gitoperator.core.models.gitcontent import FileSpec, GitContentSpec
from gitoperator.core.services.git_gh_ops import get_pr
from gitoperator.core.services.reconcile import reconcile_git_content

_OWNER = os.environ.get("GITOP_TEST_OWNER")
_REPO = os.environ.get("GITOP_TEST_REPO")
_TOKEN = os.environ.get("GITHUB_TOKEN")

pytestmark = pytest.mark.skipif(
    not (_OWNER and _REPO and _TOKEN),
    reason="GITOP_TEST_OWNER, GITOP_TEST_REPO and GITHUB_TOKEN required",
)


def test_readme_reconciled_into_pr():
    config = HookConfig(github_token=_TOKEN, slack_channel="-", openai_api_key="-")
    spec = GitContentSpec(
        owner=_OWNER,
        name=_REPO,
        files=[FileSpec(path="README.md", content="hello, world!", read_only=False)],
    )

    reconcile_git_content(spec, config)
    second = reconcile_git_content(spec, config)

    assert second.changed is False
    assert get_pr(_OWNER, _REPO, config.settings.branch, token=_TOKEN) == second.pr_exists
