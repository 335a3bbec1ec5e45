"""
Tests for the planning Context.
"""

import pytest
from pydantic import ValidationError

from kubeplan.core.context import EMPTY, Context
from kubeplan.core.errors import MissingValue, TreeTypeError
from kubeplan.core.secrets import NoopSecretProvider, StaticSecretProvider


class TestAccessors:
    def _ctx(self):
        return Context(
            env="prod",
            configs={"image": {"tag": "1.2.3"}, "replicas": 3, "debug": False, "zones": ["a"]},
            secrets=StaticSecretProvider({"db": {"password": "pw"}}),
        )

    def test_config(self):
        ctx = self._ctx()
        assert ctx.config("image.tag") == "1.2.3"
        assert ctx.config("image.digest", "none") == "none"

    def test_require(self):
        with pytest.raises(MissingValue):
            self._ctx().require("image.digest")

    def test_typed(self):
        ctx = self._ctx()
        assert ctx.config_str("image/tag") == "1.2.3"
        assert ctx.config_int("replicas") == 3
        assert ctx.config_number("replicas") == 3
        assert ctx.config_bool("debug") is False
        assert ctx.config_list("zones") == ["a"]

    def test_typed_mismatch(self):
        with pytest.raises(TreeTypeError):
            self._ctx().config_int("image.tag")

    def test_secret(self):
        assert self._ctx().secret("db/password").value == "pw"

    def test_secrets_with_prefix(self):
        assert [s.name for s in self._ctx().secrets_with_prefix("db")] == ["password"]


class TestImmutability:
    def test_frozen(self):
        with pytest.raises(ValidationError):
            Context().env = "prod"

    def test_with_configs_returns_new(self):
        base = Context(configs={"a": 1})
        extended = base.with_configs(b=2)
        assert base.configs == {"a": 1}
        assert extended.configs == {"a": 1, "b": 2}

    def test_empty_default(self):
        assert EMPTY.env == ""
        assert EMPTY.configs == {}
        assert isinstance(EMPTY.secrets, NoopSecretProvider)


class TestMerge:
    def test_other_wins(self):
        merged = Context(env="dev", configs={"a": 1, "b": 1}).merge(
            Context(env="prod", configs={"b": 2}),
        )
        assert merged.env == "prod"
        assert merged.configs == {"a": 1, "b": 2}

    def test_keeps_env_and_secrets_when_other_unset(self):
        provider = StaticSecretProvider({})
        merged = Context(env="dev", secrets=provider).merge(Context(configs={"x": 1}))
        assert merged.env == "dev"
        assert merged.secrets is provider
