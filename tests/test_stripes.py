"""Tests for stripe parsing, ordering and the segment partition."""

import random

import pytest

from tools.video.wall_tile.stripes import (
    DEFAULT_STRIPES_TEXT,
    Stripe,
    add_stripe,
    format_stripes,
    parse_color,
    parse_stripes,
    remove_stripe,
    sort_stripes,
    stripe_segments,
    update_stripe,
)


class TestParseColor:
    def test_hex_rgb(self):
        assert parse_color("#78350f") == (0x78, 0x35, 0x0F, 255)

    def test_short_hex_and_names(self):
        assert parse_color("#f00") == (255, 0, 0, 255)
        assert parse_color(" white ") == (255, 255, 255, 255)

    def test_hex_with_alpha(self):
        assert parse_color("#ff000080") == (255, 0, 0, 128)

    def test_unknown_color_raises(self):
        with pytest.raises(ValueError):
            parse_color("not-a-color")


class TestParseStripes:
    def test_default_text(self):
        stripes = parse_stripes(DEFAULT_STRIPES_TEXT)
        assert [s.position for s in stripes] == [0.0, 0.4, 0.7]
        assert stripes[1].hex_color == "#3b82f6"

    def test_malformed_lines_are_dropped(self):
        text = "\n".join([
            "abc: #ffffff",      # bad position
            "0.5",               # no separator
            "0.3: notacolor",    # bad color
            "0.1: #000: extra",  # too many parts
            "",
            "0.2: #00ff00",
        ])
        stripes = parse_stripes(text)
        assert stripes == [Stripe(0.2, (0, 255, 0, 255))]

    def test_result_is_sorted(self):
        stripes = parse_stripes("0.7: red\n0.1: blue\n0.4: lime")
        assert [s.position for s in stripes] == [0.1, 0.4, 0.7]

    def test_empty_text(self):
        assert parse_stripes("") == []
        assert parse_stripes("   \n  ") == []

    def test_format_matches_parser_input(self):
        stripes = parse_stripes("0: #78350f\n0.4: #92400e")
        assert format_stripes(stripes) == "0: #78350f\n0.4: #92400e"


class TestStripeSegments:
    def test_brick_example(self, brick_stripes):
        """Heights 1500 split into [0,600), [600,1200), [1200,1500]."""
        segments = stripe_segments(brick_stripes)
        assert [(b, t) for b, t, _ in segments] == [(0.0, 0.4), (0.4, 0.8), (0.8, 1.0)]
        assert [c for _, _, c in segments] == [s.color for s in brick_stripes]
        heights = [(1500 * b, 1500 * t) for b, t, _ in segments]
        assert heights == [
            pytest.approx((0.0, 600.0)),
            pytest.approx((600.0, 1200.0)),
            pytest.approx((1200.0, 1500.0)),
        ]

    def test_segments_partition_unit_interval(self):
        rng = random.Random(7)
        positions = [0.0] + [round(rng.random(), 3) for _ in range(12)]
        stripes = [Stripe(p, (idx, 0, 0, 255)) for idx, p in enumerate(positions)]
        rng.shuffle(stripes)

        segments = stripe_segments(stripes)
        assert segments[0][0] == 0.0
        assert segments[-1][1] == 1.0
        for (_, top, _), (bottom, _, _) in zip(segments, segments[1:]):
            assert top == bottom
        assert sum(t - b for b, t, _ in segments) == pytest.approx(1.0)

    def test_empty_list_yields_default_stripe(self):
        segments = stripe_segments([])
        assert segments == [(0.0, 1.0, (0x3B, 0x82, 0xF6, 255))]

    def test_duplicate_positions_give_zero_height_segment(self):
        stripes = [Stripe(0.5, (255, 0, 0, 255)), Stripe(0.5, (0, 255, 0, 255)), Stripe(0.0, (0, 0, 255, 255))]
        segments = stripe_segments(stripes)
        assert len(segments) == 3
        assert segments[1][0] == segments[1][1] == 0.5

    def test_sort_breaks_ties_independent_of_input_order(self):
        a = Stripe(0.5, (255, 0, 0, 255))
        b = Stripe(0.5, (0, 255, 0, 255))
        assert sort_stripes([a, b]) == sort_stripes([b, a])


class TestEditing:
    def test_add_to_empty_starts_at_zero(self):
        stripes = add_stripe([])
        assert stripes == [Stripe(0.0, (0x6B, 0x72, 0x80, 255))]

    def test_add_steps_a_tenth_and_caps(self):
        assert add_stripe([Stripe(0.4, (0, 0, 0, 255))])[-1].position == pytest.approx(0.5)
        assert add_stripe([Stripe(0.85, (0, 0, 0, 255))])[-1].position == pytest.approx(0.9)

    def test_add_does_not_mutate_input(self, brick_stripes):
        before = list(brick_stripes)
        add_stripe(brick_stripes)
        assert brick_stripes == before

    def test_remove(self, brick_stripes):
        remaining = remove_stripe(brick_stripes, 1)
        assert [s.position for s in remaining] == [0.0, 0.8]

    def test_update_resorts(self, brick_stripes):
        updated = update_stripe(brick_stripes, 0, position=0.9, color="#000000")
        assert [s.position for s in updated] == [0.4, 0.8, 0.9]
        assert updated[-1].color == (0, 0, 0, 255)
