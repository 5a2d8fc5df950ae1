from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from decisionsherlock.errors import ConfigError

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.15

API_KEY_ENV_VARS = ("DECISION_SHERLOCK_API_KEY", "OPENAI_API_KEY")


class Settings(BaseModel):
    api_key: str = Field(..., min_length=1, repr=False)
    model: str = DEFAULT_MODEL
    temperature: Optional[float] = DEFAULT_TEMPERATURE


def _first_env(*names: str) -> str | None:
    for name in names:
        val = os.getenv(name)
        if val and val.strip():
            return val.strip()
    return None


def load_settings(
    api_key: str | None = None,
    model: str | None = None,
    temperature: float | None = None,
    use_dotenv: bool = True,
) -> Settings:
    """
    Resolve settings once at startup: explicit arguments first, then env vars
    (optionally populated from a local .env file).

    The pipeline itself never reads the environment; pass the result along.
    """
    if use_dotenv:
        load_dotenv()

    key = (api_key or "").strip() or _first_env(*API_KEY_ENV_VARS)
    if not key:
        raise ConfigError(
            "No API key found. Set one of: " + ", ".join(API_KEY_ENV_VARS)
        )

    if temperature is None:
        raw_temp = _first_env("DECISION_SHERLOCK_TEMPERATURE")
        if raw_temp is not None:
            try:
                temperature = float(raw_temp)
            except ValueError as e:
                raise ConfigError(f"DECISION_SHERLOCK_TEMPERATURE is not a number: {raw_temp!r}") from e
        else:
            temperature = DEFAULT_TEMPERATURE

    return Settings(
        api_key=key,
        model=(model or "").strip() or _first_env("OPENAI_MODEL") or DEFAULT_MODEL,
        temperature=temperature,
    )
