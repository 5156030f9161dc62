"""Pure decision rules used by the stores.

This module intentionally contains *no* I/O and no store state, so each
rule can be tested in isolation.
"""

from __future__ import annotations

from elangdf._constants import ACCURACY_THRESHOLD_M
from elangdf.exceptions import LocationErrorCode

_FALLBACK_CODES: frozenset[LocationErrorCode] = frozenset(
    {LocationErrorCode.PERMISSION_DENIED, LocationErrorCode.POSITION_UNAVAILABLE}
)


def is_duplicate_token(previous: str | None, incoming: str) -> bool:
    """A sweep is "no new data" when its token repeats the last accepted one."""
    return previous is not None and incoming == previous


def is_trusted_accuracy(accuracy: float | None, threshold: float = ACCURACY_THRESHOLD_M) -> bool:
    """Accuracy, not source, gates trust in a hardware fix."""
    if accuracy is None:
        return False
    return accuracy <= threshold


def should_fall_back(code: LocationErrorCode) -> bool:
    """Hardware errors that warrant a one-shot IP geolocation attempt."""
    return code in _FALLBACK_CODES


def is_stale_age(age_seconds: float, stale_after: float | None) -> bool:
    if stale_after is None:
        return False
    return age_seconds > stale_after
