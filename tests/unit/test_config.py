"""Unit tests for settings validation"""

import pytest
from pydantic import ValidationError

from vendor_metrics.config import Settings
from vendor_metrics.domain.scoring import DEFAULT_WEIGHTS


def test_default_weights_accepted():
    assert Settings().score_weights == DEFAULT_WEIGHTS


def test_missing_weight_rejected():
    weights = dict(DEFAULT_WEIGHTS)
    weights.pop("d30")
    weights["d15"] += 0.05

    with pytest.raises(ValidationError, match="missing metrics"):
        Settings(score_weights=weights)


def test_unknown_weight_rejected():
    """A mistyped key must not count toward the 1.0 total"""
    weights = dict(DEFAULT_WEIGHTS)
    weights["revenue"] = 0.20
    weights["revenu"] = 0.05

    with pytest.raises(ValidationError, match="unknown metrics"):
        Settings(score_weights=weights)


def test_weights_must_sum_to_one():
    weights = dict(DEFAULT_WEIGHTS)
    weights["revenue"] = 0.5

    with pytest.raises(ValidationError, match="sum to 1.0"):
        Settings(score_weights=weights)
