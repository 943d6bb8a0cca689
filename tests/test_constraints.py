"""Tests for scoring configuration validation logic."""

from __future__ import annotations

from dataclasses import replace

import pytest

from taskfit.domain.constraints import (
    DEFAULT_SCORING_CONFIG,
    FitWeights,
    ScoringConfigError,
    UtilizationBands,
    validate_scoring_config,
)


def test_default_config_passes() -> None:
    validate_scoring_config(DEFAULT_SCORING_CONFIG)


def test_default_weights_sum_to_one() -> None:
    assert sum(DEFAULT_SCORING_CONFIG.weights.as_vector()) == pytest.approx(1.0)


def test_scoring_config_error_is_value_error() -> None:
    assert issubclass(ScoringConfigError, ValueError)


# --- weights ---

def test_weights_not_summing_to_one_raise() -> None:
    config = replace(DEFAULT_SCORING_CONFIG, weights=FitWeights(task_capacity=0.5))
    with pytest.raises(ScoringConfigError):
        validate_scoring_config(config)


def test_negative_weight_raises() -> None:
    weights = FitWeights(
        task_capacity=0.55,
        complexity_handling=0.20,
        skill_match=0.25,
        availability=0.15,
        collaboration=-0.10,
        learning_opportunity=-0.05,
    )
    with pytest.raises(ScoringConfigError):
        validate_scoring_config(replace(DEFAULT_SCORING_CONFIG, weights=weights))


def test_rebalanced_weights_pass() -> None:
    weights = FitWeights(
        task_capacity=0.30,
        complexity_handling=0.20,
        skill_match=0.30,
        availability=0.10,
        collaboration=0.05,
        learning_opportunity=0.05,
    )
    validate_scoring_config(replace(DEFAULT_SCORING_CONFIG, weights=weights))


# --- bands ---

def test_non_descending_bands_raise() -> None:
    bands = UtilizationBands(overloaded=130.0)
    with pytest.raises(ScoringConfigError):
        validate_scoring_config(replace(DEFAULT_SCORING_CONFIG, bands=bands))


def test_equal_bands_raise() -> None:
    bands = UtilizationBands(well_utilized=85.0)
    with pytest.raises(ScoringConfigError):
        validate_scoring_config(replace(DEFAULT_SCORING_CONFIG, bands=bands))


# --- scalars ---

def test_negative_default_capacity_raises() -> None:
    with pytest.raises(ScoringConfigError):
        validate_scoring_config(replace(DEFAULT_SCORING_CONFIG, default_week_capacity=-1))


def test_zero_proficiency_normalizer_raises() -> None:
    with pytest.raises(ScoringConfigError):
        validate_scoring_config(replace(DEFAULT_SCORING_CONFIG, proficiency_normalizer=0.0))


def test_completion_ratio_above_one_raises() -> None:
    with pytest.raises(ScoringConfigError):
        validate_scoring_config(replace(DEFAULT_SCORING_CONFIG, completion_ratio_next_period=1.2))


def test_recommended_share_boundaries_pass() -> None:
    validate_scoring_config(replace(DEFAULT_SCORING_CONFIG, recommended_share_of_week=0.0))
    validate_scoring_config(replace(DEFAULT_SCORING_CONFIG, recommended_share_of_week=1.0))
