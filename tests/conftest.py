"""Shared pytest fixtures for safecond tests."""

from __future__ import annotations

import pytest

from safecond import ExpressionLimits


@pytest.fixture
def tight_limits() -> ExpressionLimits:
    """Return limits small enough to trip in a short expression."""
    return ExpressionLimits(max_length=20, max_depth=3)
