"""Tests for configuration, theme colors and text measurement helpers."""
from __future__ import annotations

import logging
import re

import pytest

from pretty_sequence.styles import CharCountMeasurer, DEFAULT_MEASURER, ARROW_HEAD, SELF_LOOP
from pretty_sequence.theme import (
    PALETTE,
    NEUTRAL,
    palette_color,
    lifeline_color,
    line_color,
    svg_open_tag,
)
from pretty_sequence.types import (
    StyleOptions,
    LayoutMetrics,
    DEFAULT_LAYOUT,
    EXPORT_LAYOUT,
    LIFELINE_DASHES,
    METRIC_RANGES,
    lifeline_dash_pattern,
    round_half_up,
)


# ============================================================================
# Palette
# ============================================================================


class TestPalette:
    def test_has_twelve_hex_colors(self):
        assert len(PALETTE) == 12
        for color in PALETTE:
            assert re.match(r"^#[0-9a-f]{6}$", color)

    def test_cycles(self):
        assert palette_color(0) == PALETTE[0]
        assert palette_color(12) == PALETTE[0]
        assert palette_color(25) == PALETTE[1]


class TestColorRules:
    def test_colored(self):
        assert lifeline_color("#ef4444", True) == "#ef444460"
        assert line_color("#ef4444", True) == "#ef4444"

    def test_neutral(self):
        assert lifeline_color("#ef4444", False) == NEUTRAL["lifeline"]
        assert line_color("#ef4444", False) == NEUTRAL["line"]


class TestSvgOpenTag:
    def test_sets_size_and_viewbox(self):
        tag = svg_open_tag(491, 388.5)
        assert 'width="491"' in tag
        assert 'height="388.5"' in tag
        assert 'viewBox="0 0 491 388.5"' in tag


# ============================================================================
# Configuration
# ============================================================================


class TestStyleOptions:
    def test_defaults(self):
        s = StyleOptions()
        assert (s.colored_lines, s.colored_numbers, s.colored_text) == (True, True, True)
        assert s.font == "Inter"
        assert s.lifeline_dash == "circle"

    def test_from_dict_merges_over_defaults(self):
        s = StyleOptions.from_dict({"colored_text": False, "font": "Roboto"})
        assert s.colored_text is False
        assert s.font == "Roboto"
        assert s.colored_lines is True

    def test_from_dict_ignores_unknown_keys(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pretty_sequence.types"):
            s = StyleOptions.from_dict({"theme": "dark"})
        assert s == StyleOptions()
        assert "theme" in caplog.text

    def test_to_dict_round_trips(self):
        s = StyleOptions(font="Mono", lifeline_dash="dot")
        assert StyleOptions.from_dict(s.to_dict()) == s


class TestLayoutMetrics:
    def test_defaults_and_export_preset(self):
        assert DEFAULT_LAYOUT.to_dict() == {
            "step_height": 42,
            "box_width": 141,
            "spacing": 250,
            "text_size": 13,
            "margin": 50,
        }
        assert EXPORT_LAYOUT.to_dict() == {
            "step_height": 58,
            "box_width": 160,
            "spacing": 210,
            "text_size": 14,
            "margin": 60,
        }

    def test_defaults_fall_inside_ranges(self):
        for name, (low, high) in METRIC_RANGES.items():
            assert low <= getattr(DEFAULT_LAYOUT, name) <= high
            assert low <= getattr(EXPORT_LAYOUT, name) <= high

    def test_updated_skips_none(self):
        m = DEFAULT_LAYOUT.updated(margin=80, spacing=None)
        assert m.margin == 80
        assert m.spacing == 250
        assert DEFAULT_LAYOUT.margin == 50

    def test_metrics_are_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_LAYOUT.margin = 10  # type: ignore[misc]

    @pytest.mark.parametrize("value,expected", [(43.71, 44), (46.5, 47), (28.49, 28), (0.5, 1)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestLifelineDashes:
    def test_named_set(self):
        assert set(LIFELINE_DASHES) == {"circle", "dot", "small", "long"}
        circle = LIFELINE_DASHES["circle"]
        assert (circle.dasharray, circle.linecap, circle.width) == ("0 8", "round", 3)

    def test_unknown_falls_back(self):
        assert lifeline_dash_pattern("nope") == LIFELINE_DASHES["circle"]


# ============================================================================
# Measurement & constants
# ============================================================================


class TestMeasurement:
    def test_default_measurer_counts_characters(self):
        assert DEFAULT_MEASURER.measure("", 13) == 0
        assert DEFAULT_MEASURER.measure("ab", 10) == pytest.approx(12.4)

    def test_custom_ratio(self):
        assert CharCountMeasurer(0.5).measure("abcd", 12) == 24

    def test_self_loop_fits_default_row(self):
        # Loop plus its arrowhead must stay inside one default row
        assert SELF_LOOP["height"] + ARROW_HEAD["half_height"] < DEFAULT_LAYOUT.step_height
