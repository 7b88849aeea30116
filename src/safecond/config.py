"""
Limits configuration for safecond.

Configuration is loaded from the ``[safecond]`` table of a TOML file, or
``[tool.safecond]`` when the file is a pyproject.toml:

    [tool.safecond]
    max_length = 1000
    max_depth = 100
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from safecond.core.expression_lang.parser import DEFAULT_MAX_DEPTH, MAX_DEPTH
from safecond.core.expression_lang.tokenizer import DEFAULT_MAX_LENGTH

logger = logging.getLogger(__name__)

ENV_MAX_LENGTH = "SAFECOND_MAX_LENGTH"
ENV_MAX_DEPTH = "SAFECOND_MAX_DEPTH"


class ExpressionLimits(BaseModel):
    """Resource bounds applied before and during parsing."""

    max_length: int = Field(default=DEFAULT_MAX_LENGTH, ge=1, description="Max characters")
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH, description="Max nesting depth"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


DEFAULT_LIMITS = ExpressionLimits()


def load_limits(toml_path: Path) -> ExpressionLimits:
    """
    Load limits from a TOML file.

    Args:
        toml_path: Path to a safecond.toml or pyproject.toml

    Returns:
        ExpressionLimits with values from file or defaults

    Raises:
        pydantic.ValidationError: If the section holds invalid values.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if not toml_path.exists():
        logger.debug("No limits file at %s, using defaults", toml_path)
        return DEFAULT_LIMITS

    with open(toml_path, "rb") as f:
        data = tomllib.load(f)

    section = _find_section(data)
    if not section:
        return DEFAULT_LIMITS
    return ExpressionLimits.model_validate(section)


def _find_section(data: dict[str, Any]) -> dict[str, Any]:
    if "safecond" in data:
        return dict(data["safecond"])
    return dict(data.get("tool", {}).get("safecond", {}))


def limits_from_env(
    base: ExpressionLimits = DEFAULT_LIMITS,
    environ: Mapping[str, str] | None = None,
) -> ExpressionLimits:
    """Apply SAFECOND_MAX_LENGTH / SAFECOND_MAX_DEPTH overrides to base."""
    env = os.environ if environ is None else environ
    overrides: dict[str, str] = {}
    if ENV_MAX_LENGTH in env:
        overrides["max_length"] = env[ENV_MAX_LENGTH]
    if ENV_MAX_DEPTH in env:
        overrides["max_depth"] = env[ENV_MAX_DEPTH]
    if not overrides:
        return base
    return ExpressionLimits.model_validate({**base.model_dump(), **overrides})
