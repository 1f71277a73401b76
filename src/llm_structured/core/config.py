"""
Provider configuration.

Adapters never read the environment themselves; this module is the glue that
turns environment variables (optionally loaded from a ``.env`` file) into a
``ProviderSettings`` value handed to ``llm_structured.llm.factory.build_chat_client``.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal, Optional

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from llm_structured.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

ProviderName = Literal["openai", "gemini"]

DEFAULT_TIMEOUT_SECONDS = 60.0

# provider -> (api key variables in priority order, model variable, default model)
PROVIDER_ENV = {
    "openai": (("OPENAI_API_KEY",), "OPENAI_MODEL", "gpt-4o-2024-08-06"),
    "gemini": (("GEMINI_API_KEY", "GOOGLE_API_KEY"), "GEMINI_MODEL", "gemini-2.0-flash"),
}

TIMEOUT_ENV = "LLM_TIMEOUT_SECONDS"


class ProviderSettings(BaseModel):
    """
    Read-only configuration for one adapter.

    Attributes:
        provider: Backend name ("openai" or "gemini")
        api_key: Secret credential (masked in repr and logs)
        model: Model identifier
        timeout: Request timeout in seconds
    """

    model_config = ConfigDict(frozen=True)

    provider: ProviderName
    api_key: SecretStr
    model: str = Field(..., min_length=1)
    timeout: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)


def load_provider_settings(
    provider: str,
    env: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[str | Path] = None,
) -> ProviderSettings:
    """
    Build ProviderSettings from environment variables.

    Values from ``env`` (default: ``os.environ``) take precedence over values
    found in the optional ``.env`` file.

    Args:
        provider: "openai" or "gemini" (case-insensitive)
        env: Mapping to read variables from
        dotenv_path: Path of a .env file to read as a fallback

    Returns:
        Validated ProviderSettings

    Raises:
        ConfigurationError: If the provider is unknown, a required variable is
            missing or the timeout is not a positive number

    Example:
        >>> settings = load_provider_settings("openai", env={"OPENAI_API_KEY": "sk-test"})
        >>> settings.model
        'gpt-4o-2024-08-06'
    """
    name = provider.lower().strip()
    if name not in PROVIDER_ENV:
        raise ConfigurationError(
            f"Unknown LLM provider: {provider}. Supported: {', '.join(PROVIDER_ENV)}"
        )

    values: dict[str, str] = {}
    if dotenv_path is not None:
        values.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
    values.update(os.environ if env is None else env)

    key_vars, model_var, default_model = PROVIDER_ENV[name]
    api_key = next((values[var] for var in key_vars if values.get(var)), None)
    if not api_key:
        raise ConfigurationError(
            f"Missing required {name} configuration: {' or '.join(key_vars)}. "
            f"Please set the environment variable or add it to your .env file.",
            missing=list(key_vars),
        )

    raw_timeout = values.get(TIMEOUT_ENV)
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
    except ValueError as e:
        raise ConfigurationError(f"{TIMEOUT_ENV} must be a number, got {raw_timeout!r}") from e
    if timeout <= 0:
        raise ConfigurationError(f"{TIMEOUT_ENV} must be positive, got {timeout}")

    settings = ProviderSettings(
        provider=name,
        api_key=SecretStr(api_key),
        model=values.get(model_var) or default_model,
        timeout=timeout,
    )
    logger.info(f"Loaded {name} settings: model={settings.model}, timeout={settings.timeout}s")
    return settings
