"""Environment-driven configuration for providers and the proxy."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import cast

from .constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_CLOUD_PRIORITY,
    DEFAULT_LOCAL_PRIORITY,
    DEFAULT_RATE_LIMITS,
    DEFAULT_TIMEOUT_SECONDS,
    OrchestratorStrategy,
)
from .provider_catalog import PROVIDER_DEFAULTS, ProviderDefaults

logger = logging.getLogger(__name__)

ORCHESTRATOR_STRATEGIES = ("sequential", "langgraph")
LEGACY_ENV_PREFIX = "VITE_"


@dataclass(frozen=True)
class ProviderConfig:
    provider_id: str
    defaults: ProviderDefaults
    base_url: str
    default_model: str
    api_key: str | None
    timeout_seconds: float
    rate_limit_per_minute: int


@dataclass(frozen=True)
class ProxySettings:
    orchestrator: OrchestratorStrategy
    cloud_priority: tuple[str, ...]
    local_priority: tuple[str, ...]
    aws_region: str


def _lookup(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name) or environ.get(f"{LEGACY_ENV_PREFIX}{name}")
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_number(name: str, raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


def _parse_priority(raw: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if raw is None:
        return default
    ids = tuple(part.strip().lower() for part in raw.split(",") if part.strip())
    unknown = [provider_id for provider_id in ids if provider_id not in PROVIDER_DEFAULTS]
    if unknown:
        raise ValueError(f"Unknown providers in priority list: {', '.join(unknown)}")
    return ids


def load_provider_config(
    provider_id: str,
    environ: Mapping[str, str],
    secret_resolver: Callable[[str], str | None] | None = None,
) -> ProviderConfig:
    defaults = PROVIDER_DEFAULTS[provider_id]
    prefix = provider_id.upper()

    api_key = _lookup(environ, f"{prefix}_API_KEY")
    parameter_name = _lookup(environ, f"{prefix}_API_KEY_PARAMETER")
    if api_key is None and parameter_name and secret_resolver is not None:
        api_key = secret_resolver(parameter_name)

    timeout_name = f"{prefix}_TIMEOUT_SECONDS"
    rate_name = f"{prefix}_RATE_LIMIT_PER_MINUTE"
    return ProviderConfig(
        provider_id=provider_id,
        defaults=defaults,
        base_url=(_lookup(environ, f"{prefix}_URL") or defaults.base_url).rstrip("/"),
        default_model=_lookup(environ, f"{prefix}_MODEL") or defaults.default_model,
        api_key=api_key,
        timeout_seconds=_parse_number(
            timeout_name, _lookup(environ, timeout_name), DEFAULT_TIMEOUT_SECONDS
        ),
        rate_limit_per_minute=int(
            _parse_number(
                rate_name, _lookup(environ, rate_name), DEFAULT_RATE_LIMITS.get(provider_id, 0)
            )
        ),
    )


def load_provider_configs(
    environ: Mapping[str, str],
    secret_resolver: Callable[[str], str | None] | None = None,
) -> dict[str, ProviderConfig]:
    configs = {
        provider_id: load_provider_config(provider_id, environ, secret_resolver)
        for provider_id in PROVIDER_DEFAULTS
    }
    configured = sorted(pid for pid, config in configs.items() if config.api_key)
    logger.info("Provider configuration loaded", extra={"providers_with_keys": configured})
    return configs


def load_proxy_settings(environ: Mapping[str, str]) -> ProxySettings:
    orchestrator = (environ.get("AGENT_PROXY_ORCHESTRATOR") or "sequential").strip().lower()
    if orchestrator not in ORCHESTRATOR_STRATEGIES:
        raise ValueError(
            f"Unsupported orchestrator: {orchestrator}. "
            f"Allowed: {', '.join(ORCHESTRATOR_STRATEGIES)}"
        )
    return ProxySettings(
        orchestrator=cast(OrchestratorStrategy, orchestrator),
        cloud_priority=_parse_priority(
            environ.get("AGENT_PROXY_CLOUD_PRIORITY"), DEFAULT_CLOUD_PRIORITY
        ),
        local_priority=_parse_priority(
            environ.get("AGENT_PROXY_LOCAL_PRIORITY"), DEFAULT_LOCAL_PRIORITY
        ),
        aws_region=environ.get("AWS_REGION") or DEFAULT_AWS_REGION,
    )
