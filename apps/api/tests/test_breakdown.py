"""
Tests for plan breakdown parsing and notes composition.
"""
from datetime import date

from apps.legalization.breakdown import (
    PlanBreakdown,
    compose_notes,
    format_plan_breakdown,
    parse_plan_breakdown,
)


class TestParsePlanBreakdown:

    def test_long_form(self):
        assert parse_plan_breakdown('Małe: 10; Duże: 2') == PlanBreakdown(small=10, large=2, coupled=None)

    def test_long_form_wins_over_short_form(self):
        notes = 'Małe: 10; Duże: 2; Qn≤15:320, Qn>15:18'
        assert parse_plan_breakdown(notes) == PlanBreakdown(small=10, large=2, coupled=None)

    def test_long_form_with_coupled(self):
        notes = 'Małe: 10; Duże: 2; Sprzężone: 1'
        assert parse_plan_breakdown(notes) == PlanBreakdown(small=10, large=2, coupled=1)

    def test_long_form_without_diacritics(self):
        assert parse_plan_breakdown('male: 4, duze: 1') == PlanBreakdown(small=4, large=1)

    def test_short_form(self):
        notes = 'Nr wniosku: A1; Qn<15:320, Qn>15:18, sprzężone:2'
        assert parse_plan_breakdown(notes) == PlanBreakdown(small=320, large=18, coupled=2)

    def test_short_form_with_inclusive_operators(self):
        notes = 'Qn≤15:320, Qn≥15:18, sprzężony:2'
        assert parse_plan_breakdown(notes) == PlanBreakdown(small=320, large=18, coupled=2)

    def test_short_form_ascii_operators(self):
        notes = 'qn <= 15 : 7, qn >= 15 : 3'
        assert parse_plan_breakdown(notes) == PlanBreakdown(small=7, large=3)

    def test_coupled_tag_with_qn_tags_reads_short_form(self):
        notes = 'Qn<15:5, Qn>15:1, Sprzężone: 1'
        assert parse_plan_breakdown(notes) == PlanBreakdown(small=5, large=1, coupled=1)

    def test_coupled_only(self):
        assert parse_plan_breakdown('sprzężone:2') == PlanBreakdown(coupled=2)

    def test_untagged_notes(self):
        result = parse_plan_breakdown('Nr wniosku: A1; pilne')
        assert result.is_empty

    def test_empty_notes(self):
        assert parse_plan_breakdown('').is_empty
        assert parse_plan_breakdown(None).is_empty

    def test_composed_notes_parse_back(self):
        breakdown = PlanBreakdown(small=320, large=18, coupled=2)
        notes = compose_notes('OUM03', date(2025, 1, 15), breakdown, '')
        assert parse_plan_breakdown(notes) == breakdown


class TestComposeNotes:

    def test_fragment_order(self):
        notes = compose_notes('A1', date(2025, 1, 15), None, 'urgent')
        assert notes == 'Nr wniosku: A1; Złożono: 2025-01-15; urgent'

    def test_includes_breakdown(self):
        notes = compose_notes('A1', None, PlanBreakdown(small=3, large=1, coupled=0), '')
        assert notes == 'Nr wniosku: A1; Qn≤15:3, Qn>15:1, sprzężone:0'

    def test_empty_fragments_are_omitted(self):
        assert compose_notes('', None, None, '  free text  ') == 'free text'
        assert compose_notes('   ', None, None, '') == ''

    def test_empty_breakdown_is_omitted(self):
        assert compose_notes('A1', None, PlanBreakdown(), '') == 'Nr wniosku: A1'


class TestFormatPlanBreakdown:

    def test_missing_categories_render_as_zero(self):
        assert format_plan_breakdown(PlanBreakdown(small=5)) == 'Qn≤15:5, Qn>15:0, sprzężone:0'

    def test_empty(self):
        assert format_plan_breakdown(PlanBreakdown()) == ''
