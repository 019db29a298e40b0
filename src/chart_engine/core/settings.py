"""Process-level settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from chart_engine.core.constants import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_COLOR_SCHEME,
)
from chart_engine.core.errors import ConfigError

ENV_PREFIX = "CHART_ENGINE_"


class EngineSettings(BaseModel):
    width: int = Field(default=DEFAULT_CANVAS_WIDTH, gt=0)
    height: int = Field(default=DEFAULT_CANVAS_HEIGHT, gt=0)
    outputs_dir: Path = Path("outputs")
    log_level: str = "INFO"
    color_scheme: str = DEFAULT_COLOR_SCHEME


def load_settings(env_file: str | None = None) -> EngineSettings:
    """
    Build EngineSettings from CHART_ENGINE_* variables.

    Variables already present in the environment win over the .env file.
    """
    load_dotenv(env_file)
    raw: dict[str, str] = {}
    for name in EngineSettings.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value:
            raw[name] = value
    try:
        return EngineSettings.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid {ENV_PREFIX}* settings: {e}") from e
