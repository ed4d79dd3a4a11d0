"""
Plan breakdown stored as tagged text inside request notes.

Older requests carry their per-category plan only inside ``notes``, e.g.
``"Nr wniosku: X; Złożono: 2025-01-15; Qn≤15:320, Qn>15:18, sprzężone:2"``.
New requests keep these values in typed columns; the parser here is used
once, by the ``backfill_plan_breakdown`` command, and the composer keeps
writing the same human-readable summary into ``notes``.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

NOTES_SEPARATOR = '; '

# Long form: "Małe: 10; Duże: 2; Sprzężone: 1"
_LONG_SMALL = re.compile(r'ma[łl]e\s*:\s*(\d+)', re.IGNORECASE)
_LONG_LARGE = re.compile(r'du[żz]e\s*:\s*(\d+)', re.IGNORECASE)
_LONG_COUPLED = re.compile(r'sprz[ęe][żz]one\s*:\s*(\d+)', re.IGNORECASE)

# Short form: "Qn<15:320, Qn>15:18, sprzężone:2" (also ≤ / <= and ≥ / >=)
_SHORT_SMALL = re.compile(r'qn\s*(?:<=|≤|<)\s*15\s*:\s*(\d+)', re.IGNORECASE)
_SHORT_LARGE = re.compile(r'qn\s*(?:>=|≥|>)\s*15\s*:\s*(\d+)', re.IGNORECASE)
_SHORT_COUPLED = re.compile(r'sprz[ęe][żz]on[ey]\s*:\s*(\d+)', re.IGNORECASE)


@dataclass(frozen=True)
class PlanBreakdown:
    """Planned counts per meter category; None means "not stated"."""
    small: Optional[int] = None
    large: Optional[int] = None
    coupled: Optional[int] = None

    @property
    def is_empty(self):
        return self.small is None and self.large is None and self.coupled is None

    @property
    def total(self):
        return (self.small or 0) + (self.large or 0) + (self.coupled or 0)


def _first_int(pattern, text):
    match = pattern.search(text)
    return int(match.group(1)) if match else None


def parse_plan_breakdown(notes: Optional[str]) -> PlanBreakdown:
    """
    Recover a per-category plan from free-text notes.

    The long form wins whenever it names the small or large category; the
    coupled label alone is ambiguous ("sprzężone:2" belongs to both forms),
    so it only decides the form when no short-form ``Qn`` tag is present.
    Categories that are not mentioned stay None.

    >>> parse_plan_breakdown('Małe: 10; Duże: 2')
    PlanBreakdown(small=10, large=2, coupled=None)
    """
    if not notes:
        return PlanBreakdown()

    long_small = _first_int(_LONG_SMALL, notes)
    long_large = _first_int(_LONG_LARGE, notes)
    if long_small is not None or long_large is not None:
        return PlanBreakdown(
            small=long_small,
            large=long_large,
            coupled=_first_int(_LONG_COUPLED, notes),
        )

    # "sprzężone:N" is valid in both forms, so it cannot pick the long form
    # while a Qn tag is present
    short_small = _first_int(_SHORT_SMALL, notes)
    short_large = _first_int(_SHORT_LARGE, notes)
    if short_small is not None or short_large is not None:
        return PlanBreakdown(
            small=short_small,
            large=short_large,
            coupled=_first_int(_SHORT_COUPLED, notes),
        )

    return PlanBreakdown(coupled=_first_int(_LONG_COUPLED, notes))


def format_plan_breakdown(breakdown: PlanBreakdown) -> str:
    if breakdown.is_empty:
        return ''
    return (
        f"Qn≤15:{breakdown.small or 0}, "
        f"Qn>15:{breakdown.large or 0}, "
        f"sprzężone:{breakdown.coupled or 0}"
    )


def compose_notes(
    application_number: str = '',
    submitted_on: Optional[date] = None,
    breakdown: Optional[PlanBreakdown] = None,
    free_text: str = '',
) -> str:
    """
    Build the stored notes summary.

    Fragments in fixed order (application number, submission date, plan
    breakdown, free text), joined by "; ", empty fragments omitted.

    >>> compose_notes('A1', date(2025, 1, 15), None, 'urgent')
    'Nr wniosku: A1; Złożono: 2025-01-15; urgent'
    """
    fragments = []
    if application_number and application_number.strip():
        fragments.append(f"Nr wniosku: {application_number.strip()}")
    if submitted_on:
        fragments.append(f"Złożono: {submitted_on.isoformat()}")
    if breakdown is not None:
        fragments.append(format_plan_breakdown(breakdown))
    if free_text and free_text.strip():
        fragments.append(free_text.strip())
    return NOTES_SEPARATOR.join(f for f in fragments if f)
