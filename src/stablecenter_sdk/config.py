"""Service configuration.

Callers pass a partial ``SwapServiceConfig`` dict; ``resolve_config`` fills
in every default and returns an immutable ``ResolvedSwapServiceConfig``.
"""

import os
from dataclasses import dataclass
from typing import Optional, TypedDict

from dotenv import load_dotenv


DEFAULT_API_URL = "https://api.1inch.dev/fusion-plus"
DEFAULT_SOURCE = "stablecenter"
DEFAULT_PRESET = "fast"

# Windows and intervals
PREPARED_ORDER_TTL_SECONDS = 15 * 60
TIMESTAMP_MAX_AGE_MS = 10 * 60 * 1000
TIMESTAMP_FUTURE_TOLERANCE_MS = 60 * 1000
POLL_INTERVAL_SECONDS = 1.0
CHECKPOINT_TTL_SECONDS = 24 * 60 * 60
HTTP_TIMEOUT_SECONDS = 30.0


class SwapServiceConfig(TypedDict, total=False):
    """Configuration for the swap service."""

    api_url: str
    """Upstream Fusion+ API base URL. Default: 1inch public endpoint"""

    auth_key: str
    """Bearer token for the upstream API (required)"""

    source: str
    """Source tag attached to created orders. Default: "stablecenter" """

    preset: str
    """Auction preset used to pick the secret count. Default: "fast" """

    timeout: float
    """HTTP timeout in seconds. Default: 30"""

    poll_interval: float
    """Completion monitor poll interval in seconds. Default: 1"""

    prepared_order_ttl: float
    """Seconds a prepared order survives in the store. Default: 900"""

    checkpoint_ttl: float
    """Seconds a monitor checkpoint survives without progress. Default: 86400"""

    timestamp_max_age: int
    """Oldest accepted signature timestamp, in ms. Default: 600000"""

    timestamp_future_tolerance: int
    """Clock skew allowed for future timestamps, in ms. Default: 60000"""

    track_nonces: bool
    """Reject a (wallet, nonce) pair seen before. Default: True"""


@dataclass(frozen=True)
class ResolvedSwapServiceConfig:
    """Resolved service configuration with all defaults applied."""

    api_url: str
    auth_key: str
    source: str
    preset: str
    timeout: float
    poll_interval: float
    prepared_order_ttl: float
    checkpoint_ttl: float
    timestamp_max_age: int
    timestamp_future_tolerance: int
    track_nonces: bool


def resolve_config(config: Optional[SwapServiceConfig] = None) -> ResolvedSwapServiceConfig:
    """Apply defaults to a partial configuration.

    Args:
        config: Partial configuration

    Returns:
        ResolvedSwapServiceConfig

    Raises:
        ValueError: If no auth key is configured or an interval is not positive
    """
    config = config or {}

    auth_key = config.get("auth_key")
    if not auth_key:
        raise ValueError("auth_key is required to talk to the Fusion+ API")

    resolved = ResolvedSwapServiceConfig(
        api_url=config.get("api_url", DEFAULT_API_URL).rstrip("/"),
        auth_key=auth_key,
        source=config.get("source", DEFAULT_SOURCE),
        preset=config.get("preset", DEFAULT_PRESET),
        timeout=float(config.get("timeout", HTTP_TIMEOUT_SECONDS)),
        poll_interval=float(config.get("poll_interval", POLL_INTERVAL_SECONDS)),
        prepared_order_ttl=float(
            config.get("prepared_order_ttl", PREPARED_ORDER_TTL_SECONDS)
        ),
        checkpoint_ttl=float(config.get("checkpoint_ttl", CHECKPOINT_TTL_SECONDS)),
        timestamp_max_age=int(config.get("timestamp_max_age", TIMESTAMP_MAX_AGE_MS)),
        timestamp_future_tolerance=int(
            config.get("timestamp_future_tolerance", TIMESTAMP_FUTURE_TOLERANCE_MS)
        ),
        track_nonces=bool(config.get("track_nonces", True)),
    )

    if resolved.poll_interval <= 0:
        raise ValueError(f"poll_interval must be positive: {resolved.poll_interval}")
    if resolved.prepared_order_ttl <= 0:
        raise ValueError(
            f"prepared_order_ttl must be positive: {resolved.prepared_order_ttl}"
        )
    if resolved.checkpoint_ttl <= 0:
        raise ValueError(f"checkpoint_ttl must be positive: {resolved.checkpoint_ttl}")

    return resolved


def load_config_from_env(dotenv_path: Optional[str] = None) -> ResolvedSwapServiceConfig:
    """Build a resolved configuration from environment variables.

    Reads ``FUSION_AUTH_KEY`` (required), ``FUSION_API_URL``,
    ``FUSION_SOURCE`` and ``FUSION_PRESET``, loading a ``.env`` file first.
    """
    load_dotenv(dotenv_path)

    config: SwapServiceConfig = {}
    env_keys = {
        "auth_key": "FUSION_AUTH_KEY",
        "api_url": "FUSION_API_URL",
        "source": "FUSION_SOURCE",
        "preset": "FUSION_PRESET",
    }
    for key, var in env_keys.items():
        value = os.environ.get(var)
        if value:
            config[key] = value  # type: ignore[literal-required]

    if "auth_key" not in config:
        raise ValueError("FUSION_AUTH_KEY environment variable is required")

    return resolve_config(config)
