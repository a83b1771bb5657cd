"""
Decile lift computation for comparing binary classifiers

Each model's scores are ranked high to low, cut into 10 contiguous bins and
turned into the cumulative fraction of all positives captured through each bin.
The no-skill baseline is the closed form bin / 10.
"""

import logging
from typing import Dict, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

import config

logger = logging.getLogger(__name__)

N_BINS = 10
LIFT_COLUMNS = ['bin', 'cumulative_capture_fraction', 'model_name']
ZERO_POSITIVE_POLICIES = ('zero', 'raise')


class LiftError(ValueError):
    """Base class for lift computation errors"""


class InvalidInputError(LiftError):
    """Empty, misaligned or malformed labels/scores"""


class DegenerateInputError(LiftError):
    """Population without a single positive label"""


def _validate(labels, scores) -> Tuple[np.ndarray, np.ndarray]:
    labels = np.asarray(labels)
    scores = np.asarray(scores)

    if labels.ndim != 1 or scores.ndim != 1:
        raise InvalidInputError(
            f"labels and scores must be 1-D, got shapes {labels.shape} and {scores.shape}"
        )
    if len(labels) == 0:
        raise InvalidInputError("Cannot compute lift for an empty population")
    if len(labels) != len(scores):
        raise InvalidInputError(
            f"labels and scores differ in length: {len(labels)} != {len(scores)}"
        )

    try:
        scores = scores.astype(np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"scores must be numeric: {e}") from e
    if np.isnan(scores).any():
        raise InvalidInputError("scores contain NaN and cannot be ranked")

    try:
        numeric_labels = labels.astype(np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"labels must be 0/1: {e}") from e
    invalid = ~np.isin(numeric_labels, [0.0, 1.0])
    if invalid.any():
        bad = np.unique(labels[invalid])[:5]
        raise InvalidInputError(f"labels must be 0/1, found {list(bad)}")

    return numeric_labels.astype(np.int64), scores


def bin_sizes(n: int, n_bins: int = N_BINS) -> np.ndarray:
    """
    Sizes of the contiguous bins for a population of n

    The first n % n_bins bins take one extra observation (numpy.array_split
    allocation), so sizes never differ by more than one.
    """
    base, remainder = divmod(n, n_bins)
    sizes = np.full(n_bins, base, dtype=np.int64)
    sizes[:remainder] += 1
    return sizes


def assign_bins(scores, n_bins: int = N_BINS) -> np.ndarray:
    """
    Bin number (1 = highest scores) for every observation, in input order

    Ranking is a stable descending sort, so equal scores keep their input order.
    """
    scores = np.asarray(scores, dtype=np.float64)
    order = np.argsort(-scores, kind='stable')
    ranked_bins = np.repeat(np.arange(1, n_bins + 1), bin_sizes(len(scores), n_bins))
    bins = np.empty(len(scores), dtype=np.int64)
    bins[order] = ranked_bins
    return bins


def _resolve_policy(zero_positive_policy: Optional[str]) -> str:
    policy = zero_positive_policy or config.LIFT_ZERO_POSITIVE_POLICY
    if policy not in ZERO_POSITIVE_POLICIES:
        raise ValueError(
            f"Unknown zero-positive policy {policy!r}, expected one of {ZERO_POSITIVE_POLICIES}"
        )
    return policy


def calculate_lift(labels, scores, model_name: str = 'model',
                   zero_positive_policy: Optional[str] = None) -> pd.DataFrame:
    """
    Cumulative capture of positives per score decile

    Args:
        labels: Binary ground truth (0/1 or bool), one per observation
        scores: Predicted scores aligned with labels, higher means more likely positive
        model_name: Tag copied to every output row
        zero_positive_policy: 'zero' returns an all-zero curve when there are no
            positives, 'raise' raises DegenerateInputError. Defaults to
            config.LIFT_ZERO_POSITIVE_POLICY.

    Returns:
        DataFrame: 10 rows with columns bin, cumulative_capture_fraction, model_name

    Raises:
        InvalidInputError: empty input, mismatched lengths, non 0/1 labels or NaN scores
        DegenerateInputError: no positives under the 'raise' policy
    """
    policy = _resolve_policy(zero_positive_policy)
    labels, scores = _validate(labels, scores)

    bins = assign_bins(scores)
    counts = np.bincount(bins, weights=labels, minlength=N_BINS + 1)[1:]
    captured = np.cumsum(counts)
    total_positive = captured[-1]

    if total_positive == 0:
        if policy == 'raise':
            raise DegenerateInputError(
                f"{model_name}: population of {len(labels)} has no positive labels"
            )
        logger.warning(f"⚠️ {model_name}: no positive labels, lift curve is all zeros")
        fraction = np.zeros(N_BINS, dtype=np.float64)
    else:
        fraction = captured / total_positive

    return pd.DataFrame({
        'bin': np.arange(1, N_BINS + 1, dtype=np.int64),
        'cumulative_capture_fraction': fraction,
        'model_name': model_name,
    }, columns=LIFT_COLUMNS)


def baseline_lift(model_name: str = 'baseline') -> pd.DataFrame:
    """No-skill curve: a random ranking captures bin / 10 of the positives"""
    bins = np.arange(1, N_BINS + 1, dtype=np.int64)
    return pd.DataFrame({
        'bin': bins,
        'cumulative_capture_fraction': bins / N_BINS,
        'model_name': model_name,
    }, columns=LIFT_COLUMNS)


def compare_lift(labels, scores_by_model: Union[Mapping[str, object], pd.DataFrame],
                 include_baseline: bool = True,
                 zero_positive_policy: Optional[str] = None
                 ) -> Tuple[pd.DataFrame, Dict[str, LiftError]]:
    """
    Lift curves for several models over the same labelled population

    Args:
        labels: Ground truth shared by all models
        scores_by_model: Mapping (or DataFrame columns) of model name to scores
        include_baseline: Append the baseline curve after the models
        zero_positive_policy: See calculate_lift

    Returns:
        Tuple of (long lift table, failures) where failures maps the name of
        every model whose computation raised LiftError to that error
    """
    policy = _resolve_policy(zero_positive_policy)
    if isinstance(scores_by_model, pd.DataFrame):
        items = [(str(name), scores_by_model[name].to_numpy()) for name in scores_by_model.columns]
    else:
        items = list(scores_by_model.items())

    tables = []
    failures = {}
    for name, scores in items:
        try:
            tables.append(calculate_lift(labels, scores, model_name=name,
                                         zero_positive_policy=policy))
        except LiftError as e:
            logger.error(f"❌ Lift failed for {name}: {e}")
            failures[name] = e

    if include_baseline:
        tables.append(baseline_lift())

    if not tables:
        return pd.DataFrame(columns=LIFT_COLUMNS), failures

    return pd.concat(tables, ignore_index=True), failures


def lift_table_wide(table: pd.DataFrame) -> pd.DataFrame:
    """One row per bin, one column per model, models in first-seen order"""
    wide = table.pivot(index='bin', columns='model_name', values='cumulative_capture_fraction')
    wide = wide[list(pd.unique(table['model_name']))]
    wide.columns.name = None
    return wide
