"""
Engine configuration.

Settings are validated with Pydantic v2 and can be loaded from ``GIT_ENGINE_*``
environment variables.
"""

import os
from typing import Dict, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "GIT_ENGINE_"
SIGN_COMMITS_ENV = "GIT_SIGN_COMMITS"

DEFAULT_MAX_OUTPUT_BYTES = 50 * 1024 * 1024

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class EngineConfig(BaseModel):
    """Runtime settings shared by every call made through one engine."""

    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)

    git_binary: str = Field(default="git", min_length=1, description="Git executable")
    timeout_seconds: Optional[float] = Field(
        default=120.0, gt=0, description="Per-call time budget; None disables it"
    )
    kill_grace_seconds: float = Field(
        default=2.0, ge=0, description="Delay between SIGTERM and SIGKILL"
    )
    max_output_bytes: int = Field(
        default=DEFAULT_MAX_OUTPUT_BYTES,
        gt=0,
        description="Ceiling for combined stdout and stderr of one process",
    )
    locale: str = Field(
        default="C", min_length=1, description="Value for LC_ALL and LANG"
    )
    sign_commits: bool = Field(
        default=False, description="Default for options whose sign field is None"
    )
    extra_env: Dict[str, str] = Field(
        default_factory=dict, description="Additional environment for git"
    )

    @field_validator("extra_env")
    @classmethod
    def validate_extra_env(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Reject entries that would disable non-interactive execution."""
        if v.get("GIT_TERMINAL_PROMPT", "0") != "0":
            raise ValueError("GIT_TERMINAL_PROMPT must stay disabled")
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """
        Build a configuration from environment variables.

        Recognized variables are ``GIT_ENGINE_GIT_BINARY``,
        ``GIT_ENGINE_TIMEOUT_SECONDS`` (``none`` disables the timeout),
        ``GIT_ENGINE_KILL_GRACE_SECONDS``, ``GIT_ENGINE_MAX_OUTPUT_BYTES``,
        ``GIT_ENGINE_LOCALE`` and ``GIT_SIGN_COMMITS``.

        Raises:
            ValueError: If a variable holds a value that cannot be converted.
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, object] = {}

        for name in (
            "git_binary",
            "timeout_seconds",
            "kill_grace_seconds",
            "max_output_bytes",
            "locale",
        ):
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None:
                continue
            if name == "timeout_seconds" and raw.strip().lower() in ("none", "0"):
                values[name] = None
            else:
                values[name] = raw

        sign = environ.get(SIGN_COMMITS_ENV)
        if sign is not None:
            values["sign_commits"] = _parse_flag(SIGN_COMMITS_ENV, sign)

        config = cls.model_validate(values)
        logger.debug(f"Loaded engine configuration from environment: {values}")
        return config


def _parse_flag(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")
