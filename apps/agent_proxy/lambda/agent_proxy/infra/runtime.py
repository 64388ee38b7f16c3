"""Runtime infrastructure: SSM-backed secrets and LangSmith tracing setup."""

import logging
import os
from functools import lru_cache
from typing import Any

import boto3
from langsmith.run_trees import get_cached_client

from agent_proxy.constants import DEFAULT_AWS_REGION, LANGSMITH_PROJECT

logger = logging.getLogger(__name__)

LANGSMITH_API_KEY_PARAMETER_ENV = "LANGSMITH_API_KEY_PARAMETER"


@lru_cache(maxsize=None)
def get_ssm_client(region: str) -> Any:
    return boto3.client("ssm", region_name=region)


def resolve_secret(parameter_name: str, region: str | None = None) -> str | None:
    """Read a SecureString from SSM.

    Missing, empty or unreadable parameters yield ``None`` so the provider that
    needed the key simply stays unconfigured.
    """
    region = region or os.environ.get("AWS_REGION") or DEFAULT_AWS_REGION
    try:
        result = get_ssm_client(region).get_parameter(Name=parameter_name, WithDecryption=True)
    except Exception:
        logger.warning(
            "SSM parameter could not be read",
            extra={"parameter_name": parameter_name, "region": region},
            exc_info=True,
        )
        return None

    value = result["Parameter"].get("Value")
    if not value:
        logger.warning("SSM parameter is empty", extra={"parameter_name": parameter_name})
        return None
    return value


def _langsmith_api_key() -> str | None:
    api_key = os.environ.get("LANGSMITH_API_KEY")
    if api_key:
        return api_key
    parameter_name = os.environ.get(LANGSMITH_API_KEY_PARAMETER_ENV)
    return resolve_secret(parameter_name) if parameter_name else None


def _tracing_enabled() -> bool:
    return os.environ.get("LANGSMITH_TRACING", "").lower() == "true" and bool(
        os.environ.get("LANGSMITH_API_KEY")
    )


@lru_cache(maxsize=1)
def ensure_langsmith_configured() -> None:
    """Turn LangSmith tracing on for this process if an API key can be found."""
    api_key = _langsmith_api_key()
    if api_key is None:
        os.environ.pop("LANGSMITH_TRACING", None)
        os.environ.pop("LANGSMITH_API_KEY", None)
        logger.info("LangSmith tracing disabled; no API key available")
        return

    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = api_key
    os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)
    logger.info("LangSmith tracing enabled", extra={"project": os.environ["LANGSMITH_PROJECT"]})


def flush_langsmith_traces() -> None:
    if not _tracing_enabled():
        return
    try:
        get_cached_client().flush()
    except Exception:
        logger.warning("LangSmith trace flush failed", exc_info=True)
