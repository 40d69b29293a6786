"""Tests for configuration, the expiring store and the error taxonomy."""

import pytest

from stablecenter_sdk.config import (
    DEFAULT_API_URL,
    load_config_from_env,
    resolve_config,
)
from stablecenter_sdk.errors import (
    QuoteFetchError,
    SwapError,
    UnresolvedTokenError,
    UpstreamError,
    ValidationError,
)
from stablecenter_sdk.store import MemoryStore


ENV_VARS = ["FUSION_AUTH_KEY", "FUSION_API_URL", "FUSION_SOURCE", "FUSION_PRESET"]


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestResolveConfig:
    """Tests for config defaults."""

    def test_defaults(self):
        config = resolve_config({"auth_key": "k"})

        assert config.api_url == DEFAULT_API_URL
        assert config.source == "stablecenter"
        assert config.preset == "fast"
        assert config.poll_interval == 1.0
        assert config.prepared_order_ttl == 900
        assert config.checkpoint_ttl == 24 * 60 * 60
        assert config.timestamp_max_age == 600_000
        assert config.timestamp_future_tolerance == 60_000
        assert config.track_nonces is True

    def test_overrides(self):
        config = resolve_config(
            {"auth_key": "k", "api_url": "http://localhost:8080/", "preset": "slow"}
        )

        assert config.api_url == "http://localhost:8080"
        assert config.preset == "slow"

    def test_requires_auth_key(self):
        with pytest.raises(ValueError, match="auth_key"):
            resolve_config({})

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError, match="poll_interval"):
            resolve_config({"auth_key": "k", "poll_interval": 0})

    def test_rejects_non_positive_checkpoint_ttl(self):
        with pytest.raises(ValueError, match="checkpoint_ttl"):
            resolve_config({"auth_key": "k", "checkpoint_ttl": -1})


class TestLoadConfigFromEnv:
    """Tests for environment loading."""

    def test_from_environment(self, clean_env, tmp_path):
        clean_env.setenv("FUSION_AUTH_KEY", "env-key")
        clean_env.setenv("FUSION_SOURCE", "my-app")

        config = load_config_from_env(str(tmp_path / "missing.env"))

        assert config.auth_key == "env-key"
        assert config.source == "my-app"
        assert config.api_url == DEFAULT_API_URL

    def test_from_dotenv_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("FUSION_AUTH_KEY=file-key\nFUSION_PRESET=medium\n")

        config = load_config_from_env(str(env_file))

        assert config.auth_key == "file-key"
        assert config.preset == "medium"

    def test_missing_auth_key(self, clean_env, tmp_path):
        with pytest.raises(ValueError, match="FUSION_AUTH_KEY"):
            load_config_from_env(str(tmp_path / "missing.env"))


class TestMemoryStore:
    """Tests for the expiring in-memory store."""

    def test_put_get_consume(self):
        store = MemoryStore()
        store.put("a", 1)

        assert store.get("a") == 1
        assert store.has("a")
        assert store.consume("a") == 1
        assert store.consume("a") is None
        assert len(store) == 0

    def test_expiry(self):
        now = [0.0]
        store = MemoryStore(clock=lambda: now[0])
        store.put("a", 1, ttl=10)
        store.put("b", 2)

        now[0] = 10.001
        assert store.get("a") is None
        assert store.get("b") == 2

    def test_purge_expired(self):
        now = [0.0]
        store = MemoryStore(clock=lambda: now[0])
        store.put("a", 1, ttl=1)
        store.put("b", 2, ttl=100)

        now[0] = 5
        store.purge_expired()

        assert len(store) == 1

    def test_delete(self):
        store = MemoryStore()
        store.put("a", 1)
        store.delete("a")
        store.delete("a")

        assert not store.has("a")


class TestErrors:
    """Tests for the error taxonomy."""

    def test_to_dict(self):
        error = QuoteFetchError("boom", status_code=502, body="bad gateway")

        assert isinstance(error, UpstreamError)
        assert error.to_dict() == {
            "kind": "quote_fetch_error",
            "message": "boom",
            "status_code": 502,
            "body": "bad gateway",
        }

    def test_validation_error_is_value_error(self):
        error = UnresolvedTokenError(137)

        assert isinstance(error, ValidationError)
        assert isinstance(error, ValueError)
        assert isinstance(error, SwapError)
        assert str(error) == (
            "Token address is required for chain ID 137. No default USDC token available."
        )
        assert error.to_dict()["chain_id"] == 137
