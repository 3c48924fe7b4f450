"""Weighted scoring of validation checks."""

from types import MappingProxyType
from typing import Iterable, Mapping

from .models import Status, ValidationCheck, round_half_up


DEFAULT_WEIGHTS: Mapping[str, int] = MappingProxyType({
    "og:title": 15,
    "og:description": 15,
    "og:image": 20,
    "og:image URL": 5,
    "og:image accessible": 15,
    "og:image format": 5,
    "og:image size": 10,
    "og:image dimensions": 10,
    "og:url": 5,
    "twitter:card": 5,
})

DEFAULT_WEIGHT = 5

CREDIT = MappingProxyType({
    Status.PASS: 1.0,
    Status.WARN: 0.5,
    Status.FAIL: 0.0,
})


def calculate_score(
    checks: Iterable[ValidationCheck],
    weights: Mapping[str, int] = DEFAULT_WEIGHTS,
    default_weight: int = DEFAULT_WEIGHT,
) -> int:
    """Score checks 0-100 over the weights of the checks actually present.

    pass earns the full weight, warn half, fail nothing. An empty set of
    checks scores 0.
    """
    earned = 0.0
    possible = 0

    for check in checks:
        weight = weights.get(check.name, default_weight)
        possible += weight
        earned += weight * CREDIT[check.status]

    if possible == 0:
        return 0
    return round_half_up(100 * earned / possible)
