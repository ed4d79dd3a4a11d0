"""
Progress of recorded work against a plan.

Pure functions, no database access. Used for a single aggregate total and
for each meter category of a plan breakdown alike.
"""
import math
from dataclasses import asdict, dataclass
from typing import Iterable, Optional, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Progress:
    planned: int
    done: int
    remaining: int
    overflow: int
    percent: int

    def as_dict(self):
        return asdict(self)


def _sanitize_planned(planned) -> int:
    try:
        value = float(planned)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value) or value <= 0:
        return 0
    return math.floor(value)


def _sanitize_count(count) -> int:
    """Negative, fractional or missing counts never reduce the total."""
    if count is None:
        return 0
    try:
        value = float(count)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value):
        return 0
    return max(0, math.floor(value))


def compute_progress(planned: Optional[Number], counts: Iterable[Optional[Number]]) -> Progress:
    """
    Turn a planned quantity and recorded unit counts into progress figures.

    - ``planned`` that is not finite or <= 0 counts as 0
    - ``done`` sums ``max(0, floor(count))`` over all counts
    - ``percent`` is an integer in [0, 100], capped even when work
      overflowed the plan, and 0 when nothing was planned

    >>> compute_progress(10, [4, 11]).overflow
    5
    """
    safe_planned = _sanitize_planned(planned)
    done = sum(_sanitize_count(c) for c in counts)

    remaining = max(0, safe_planned - done)
    overflow = max(0, done - safe_planned)
    if safe_planned > 0:
        # Round half up, as a progress bar would
        percent = min(100, math.floor(done * 100 / safe_planned + 0.5))
    else:
        percent = 0

    return Progress(
        planned=safe_planned,
        done=done,
        remaining=remaining,
        overflow=overflow,
        percent=percent,
    )
