from enum import Enum
from typing import Union


class RatioBound(Enum):
    """
    Tagged result for ratios with a zero denominator and a positive numerator
    (e.g. profit factor without losing trades). Never a number, so it cannot leak into averages.
    """
    UNBOUNDED = "unbounded"

    def __repr__(self) -> str:
        return "UNBOUNDED"


UNBOUNDED = RatioBound.UNBOUNDED

# A ratio is either a finite float or the UNBOUNDED marker
Ratio = Union[float, RatioBound]


def is_unbounded(value: Ratio) -> bool:
    return value is UNBOUNDED


def cap_ratio(value: Ratio, cap: float) -> float:
    """ Numeric view of a ratio for blending into scores. UNBOUNDED -> cap. """
    if is_unbounded(value):
        return cap
    return min(value, cap)


def ratio_to_json(value: Ratio):
    """ JSON-safe view: UNBOUNDED -> "unbounded", numbers unchanged. """
    if is_unbounded(value):
        return value.value
    return value
