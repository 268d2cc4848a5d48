"""Configuration: pydantic schema wall in front of a frozen runtime Config.

Resolution precedence is ``defaults < environment < overrides``. A ``.env``
file in the working directory is loaded into the environment first.

Example:
    config = resolve_config({"max_workers": 8})
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from quill.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

_ENV_PREFIX = "QUILL_"
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


class Settings(BaseModel):
    """Schema for configuration validation and defaults."""

    #: Upper bound on threads used by `PlanCalculator.plans_for`.
    max_workers: int = Field(default=4, ge=1)
    #: Log every computed plan's serialized form at DEBUG level.
    log_plans: bool = Field(default=False)

    model_config = {"extra": "forbid"}

    @field_validator("log_plans", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> Any:
        """Accept the usual spellings of boolean environment flags."""
        if isinstance(v, str):
            lowered = v.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
        return v


@dataclass(frozen=True)
class Config:
    """Immutable configuration for plan calculation."""

    max_workers: int = 4
    log_plans: bool = False


def load_env() -> dict[str, str]:
    """Return QUILL_* environment variables keyed by setting name."""
    known = set(Settings.model_fields)
    values: dict[str, str] = {}
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        name = key[len(_ENV_PREFIX) :].lower()
        if name in known:
            values[name] = value
    return values


def resolve_config(overrides: Mapping[str, Any] | None = None) -> Config:
    """Resolve configuration from the environment and *overrides*.

    Raises:
        ConfigurationError: If configuration validation fails.
    """
    load_dotenv()
    merged: dict[str, Any] = {**load_env(), **(overrides or {})}

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        raise ConfigurationError(
            f"Configuration validation failed for {loc or 'config'}: {err.get('msg')}",
            hint=f"Check {_ENV_PREFIX}{loc.upper()} or the matching override.",
        ) from e

    return Config(max_workers=settings.max_workers, log_plans=settings.log_plans)
