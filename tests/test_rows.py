"""Row model and derivation engine."""

from datetime import date

import pytest

from core.services.rows import (
    clamp_kenya_sales,
    edit_field,
    generate_initial_rows,
    rescale_kenya_sales,
    set_global_ratio,
)
from core.config import Settings
from core.utils import round_half_up


def _row(rows, row_id):
    return next(r for r in rows if r.id == row_id)


class TestSeedData:
    def test_ten_rows_with_weekly_cadence(self, seed_rows):
        assert len(seed_rows) == 10
        assert [r.id for r in seed_rows] == list(range(10))
        assert [r.batch for r in seed_rows] == list(range(20, 30))
        assert seed_rows[0].date == date(2025, 3, 7)
        assert seed_rows[1].date == date(2025, 3, 28)
        assert seed_rows[-1].date == date(2025, 9, 12)

    def test_agave_grows_by_five_and_caps_at_100(self, seed_rows):
        assert [r.agave for r in seed_rows] == [65, 70, 75, 80, 85, 90, 95, 100, 100, 100]

    def test_derived_fields(self, seed_rows):
        for r in seed_rows:
            assert r.fermented_liquid == r.agave * 35
            assert r.bottles == r.agave * r.bottle_ratio
            assert r.kenya_sales == round(r.bottles * 0.2)
        assert seed_rows[0].bottles == 130
        assert seed_rows[0].kenya_sales == 26

    def test_settings_drive_the_seed(self):
        rows = generate_initial_rows(Settings(row_count=3, seed_batch=1, bottle_ratio=3.0))
        assert [r.batch for r in rows] == [1, 2, 3]
        assert rows[0].bottles == 195


class TestEditAgave:
    def test_preserves_kenya_proportion(self, seed_rows):
        out = edit_field(seed_rows, 0, "agave", "70")
        r = _row(out, 0)
        assert r.agave == 70
        assert r.fermented_liquid == 2450
        assert r.bottles == 140
        assert r.kenya_sales == 28

    def test_zero_prior_bottles_defaults_to_twenty_percent(self, make_row):
        rows = [make_row(0, date(2025, 3, 7), 0, kenya=0)]
        out = edit_field(rows, 0, "agave", "50")
        assert out[0].bottles == 100
        assert out[0].kenya_sales == 20

    def test_unparseable_value_leaves_row_unchanged(self, seed_rows):
        out = edit_field(seed_rows, 0, "agave", "lots")
        assert out == seed_rows

    def test_other_rows_untouched(self, seed_rows):
        out = edit_field(seed_rows, 3, "agave", "10")
        for before, after in zip(seed_rows, out):
            if before.id != 3:
                assert before is after

    def test_does_not_mutate_input(self, seed_rows):
        snapshot = list(seed_rows)
        edit_field(seed_rows, 0, "agave", "99")
        assert seed_rows == snapshot


class TestEditBottleRatio:
    def test_rederives_bottles_from_agave(self, seed_rows):
        out = edit_field(seed_rows, 0, "bottle_ratio", "3")
        r = _row(out, 0)
        assert r.bottle_ratio == 3
        assert r.bottles == 195
        assert r.kenya_sales == 39
        assert r.fermented_liquid == 65 * 35

    def test_nan_is_ignored(self, seed_rows):
        assert edit_field(seed_rows, 0, "bottle_ratio", "nan") == seed_rows

    def test_zero_prior_bottles_defaults_to_twenty_percent(self, make_row):
        rows = [make_row(0, date(2025, 3, 7), 65, ratio=0, kenya=0)]
        out = edit_field(rows, 0, "bottle_ratio", "2")
        assert out[0].bottles == 130
        assert out[0].kenya_sales == round_half_up(0.2 * 130)


class TestEditKenyaSales:
    def test_clamped_to_bottles(self, seed_rows):
        out = edit_field(seed_rows, 0, "kenya_sales", "500")
        assert _row(out, 0).kenya_sales == 130

    def test_clamped_to_zero(self, seed_rows):
        out = edit_field(seed_rows, 0, "kenya_sales", "-5")
        assert _row(out, 0).kenya_sales == 0

    def test_bottles_unaffected(self, seed_rows):
        out = edit_field(seed_rows, 0, "kenya_sales", "60")
        r = _row(out, 0)
        assert r.kenya_sales == 60
        assert r.bottles == 130


class TestDirectOverrides:
    def test_bottles_stored_verbatim(self, seed_rows):
        out = edit_field(seed_rows, 0, "bottles", "500")
        r = _row(out, 0)
        assert r.bottles == 500
        assert r.agave == 65
        assert r.bottle_ratio == 2
        assert r.kenya_sales == 26

    def test_fermented_liquid_stored_verbatim(self, seed_rows):
        out = edit_field(seed_rows, 0, "fermented_liquid", "1234.5")
        r = _row(out, 0)
        assert r.fermented_liquid == 1234.5
        assert r.bottles == 130


class TestEditBatchAndDate:
    def test_batch_parsed_as_integer(self, seed_rows):
        out = edit_field(seed_rows, 0, "batch", "42")
        assert _row(out, 0).batch == 42

    def test_batch_decimal_text_truncates(self, seed_rows):
        out = edit_field(seed_rows, 0, "batch", "42.9")
        assert _row(out, 0).batch == 42

    def test_date_parsed_day_first(self, seed_rows):
        out = edit_field(seed_rows, 0, "date", "1/4/2025")
        assert _row(out, 0).date == date(2025, 4, 1)

    @pytest.mark.parametrize("text", ["2025-04-01", "31/2/2025", "a/b/c", "", "7/3/202²"])
    def test_bad_date_leaves_row_unchanged(self, seed_rows, text):
        assert edit_field(seed_rows, 0, "date", text) == seed_rows


def test_unknown_field_raises(seed_rows):
    with pytest.raises(ValueError):
        edit_field(seed_rows, 0, "price", "1")


def test_unknown_row_id_is_a_no_op(seed_rows):
    assert edit_field(seed_rows, 99, "agave", "10") == seed_rows


class TestGlobalRatio:
    def test_applies_to_every_row(self, seed_rows):
        out = set_global_ratio(seed_rows, 3)
        assert out[0].bottles == 195
        for r in out:
            assert r.bottle_ratio == 3
            assert r.bottles == r.agave * 3

    def test_keeps_each_rows_kenya_share(self, seed_rows):
        rows = edit_field(seed_rows, 0, "kenya_sales", "65")  # 50%
        out = set_global_ratio(rows, "3")
        assert out[0].kenya_sales == 98  # 97.5 rounds half-up
        assert out[1].kenya_sales == 42

    def test_zero_prior_bottles_defaults_to_twenty_percent(self, make_row):
        rows = [
            make_row(0, date(2025, 3, 7), 65, ratio=0, kenya=0),
            make_row(1, date(2025, 3, 28), 70, ratio=0, kenya=0),
        ]
        out = set_global_ratio(rows, 2)
        for r in out:
            assert r.bottles == r.agave * 2
            assert r.kenya_sales == round_half_up(0.2 * r.bottles)

    @pytest.mark.parametrize("raw", ["", "abc", "inf", None])
    def test_non_finite_ratio_is_a_no_op(self, seed_rows, raw):
        assert set_global_ratio(seed_rows, raw) == seed_rows


class TestKenyaHelpers:
    def test_rescale_rounds_half_up(self):
        assert rescale_kenya_sales(1, 2, 5) == 3

    def test_rescale_never_exceeds_bottles(self):
        assert rescale_kenya_sales(10, 10, 7) == 7

    def test_clamp_with_negative_bottles(self):
        assert clamp_kenya_sales(5, -10) == 0


def test_invariants_hold_after_edits(seed_rows):
    rows = seed_rows
    for row_id, field, raw in [
        (0, "agave", "71"),
        (1, "bottle_ratio", "2.5"),
        (2, "kenya_sales", "1000"),
        (3, "agave", "0"),
        (3, "agave", "40"),
    ]:
        rows = edit_field(rows, row_id, field, raw)
    rows = set_global_ratio(rows, 1.7)
    for r in rows:
        assert r.fermented_liquid == r.agave * 35
        assert r.bottles == r.agave * r.bottle_ratio
        assert 0 <= r.kenya_sales <= r.bottles
