"""
Configuration for the calculator front end.

Values come from, in increasing priority: model defaults, a .env file (via python-dotenv), the
process environment (VARCALC_* variables), and explicit overrides passed by the command line.
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "VARCALC_"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class CalculatorConfig(BaseModel):
    """Settings for the REPL front end."""
    prompt: str = "> "
    history_file: str = Field(
        default="~/.varcalc_history", validate_default=True, description="prompt_toolkit history file"
    )
    log_level: str = Field(default="WARNING", description="Logging level name")
    use_prompt_toolkit: bool = True
    show_banner: bool = True

    @field_validator('history_file')
    @classmethod
    def expand_history_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('History file path cannot be empty')
        return os.path.expanduser(v.strip())

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level {v!r}; expected one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)


def load_config(env_file: Optional[str] = None, **overrides: Any) -> CalculatorConfig:
    """
    Build the configuration.

    Args:
        env_file: Optional path to a .env file; when None python-dotenv searches for one
        **overrides: Field values that win over the environment; None values are ignored

    Returns:
        A validated CalculatorConfig

    Raises:
        pydantic.ValidationError: If any value fails validation
    """
    load_dotenv(env_file, override=False)
    values: Dict[str, Any] = {}
    for field in CalculatorConfig.model_fields:
        env_value = os.getenv(ENV_PREFIX + field.upper())
        if env_value is not None:
            values[field] = env_value
    values.update({k: v for k, v in overrides.items() if v is not None})
    return CalculatorConfig(**values)
