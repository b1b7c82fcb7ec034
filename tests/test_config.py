"""
Tests for configuration loading — environment, YAML settings, subscription.
"""

import textwrap
from pathlib import Path

import pytest

from gitoperator.core.config.loader import (
    ConfigError,
    HookConfig,
    HookSettings,
    load_config,
    load_settings,
)
from gitoperator.core.config.subscription import hook_config

ENV = {
    "GITHUB_TOKEN": "ghp_test",
    "SLACK_CHANNEL": "#ops",
    "OPENAI_API_KEY": "sk-test",
}


class TestLoadConfig:
    def test_minimal_env(self):
        config = load_config(ENV)
        assert config.github_token == "ghp_test"
        assert config.slack_channel == "#ops"
        assert config.openai_api_key == "sk-test"
        assert config.binding_context_path is None
        assert config.settings == HookSettings()

    @pytest.mark.parametrize("missing", ["GITHUB_TOKEN", "SLACK_CHANNEL", "OPENAI_API_KEY"])
    def test_required_variable_missing(self, missing):
        env = {k: v for k, v in ENV.items() if k != missing}
        with pytest.raises(ConfigError, match=missing):
            load_config(env)

    def test_empty_variable_counts_as_missing(self):
        with pytest.raises(ConfigError, match="GITHUB_TOKEN"):
            load_config({**ENV, "GITHUB_TOKEN": ""})

    def test_binding_context_path(self, tmp_path: Path):
        ctx = tmp_path / "ctx.json"
        config = load_config({**ENV, "BINDING_CONTEXT_PATH": str(ctx)})
        assert config.require_binding_context() == ctx

    def test_binding_context_required_on_demand(self):
        config = load_config(ENV)
        with pytest.raises(ConfigError, match="BINDING_CONTEXT_PATH"):
            config.require_binding_context()

    def test_settings_file_from_env(self, tmp_path: Path):
        f = tmp_path / "hook.yml"
        f.write_text("branch: bot-sync\n")
        config = load_config({**ENV, "GITOP_CONFIG_FILE": str(f)})
        assert config.settings.branch == "bot-sync"

    def test_explicit_settings_file_wins(self, tmp_path: Path):
        env_file = tmp_path / "env.yml"
        env_file.write_text("branch: from-env\n")
        cli_file = tmp_path / "cli.yml"
        cli_file.write_text("branch: from-cli\n")
        config = load_config({**ENV, "GITOP_CONFIG_FILE": str(env_file)}, config_file=cli_file)
        assert config.settings.branch == "from-cli"


class TestDefaults:
    def test_fixed_identity_and_branch(self):
        s = HookSettings()
        assert s.branch == "gitoperator"
        assert s.bot_name == "Wing Cloud Bot"
        assert s.bot_email == "bot@wing.cloud"
        assert s.git_base_url == "https://github.com"
        assert s.default_namespace == "default"

    def test_config_is_plain_data(self):
        config = HookConfig(github_token="t", slack_channel="c", openai_api_key="k")
        assert config.settings.branch == "gitoperator"


class TestLoadSettings:
    def test_full_file(self, tmp_path: Path):
        f = tmp_path / "hook.yml"
        f.write_text(textwrap.dedent("""\
            branch: sync
            bot_name: Robot
            bot_email: robot@example.com
            commit_message: "chore: sync files"
            git_timeout: 60
        """))
        s = load_settings(f)
        assert s.branch == "sync"
        assert s.bot_name == "Robot"
        assert s.commit_message == "chore: sync files"
        assert s.git_timeout == 60

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        f = tmp_path / "hook.yml"
        f.write_text("")
        assert load_settings(f) == HookSettings()

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        f = tmp_path / "hook.yml"
        f.write_text("branch: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(f)

    def test_not_a_mapping(self, tmp_path: Path):
        f = tmp_path / "hook.yml"
        f.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(f)

    def test_unknown_key_rejected(self, tmp_path: Path):
        f = tmp_path / "hook.yml"
        f.write_text("github_token: sneaky\n")
        with pytest.raises(ConfigError, match="Invalid hook settings"):
            load_settings(f)

    def test_non_positive_timeout_rejected(self, tmp_path: Path):
        f = tmp_path / "hook.yml"
        f.write_text("gh_timeout: 0\n")
        with pytest.raises(ConfigError):
            load_settings(f)


class TestSubscription:
    def test_descriptor(self):
        assert hook_config() == {
            "configVersion": "v1",
            "kubernetes": [
                {
                    "apiVersion": "wingcloud.com/v1",
                    "kind": "GitContent",
                    "executeHookOnEvent": ["Added", "Modified", "Deleted"],
                },
            ],
        }
