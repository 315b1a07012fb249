"""
Tests for scales and ScaleDomainBuilder.

Run with: pytest tests/test_scales.py -v
"""
import pytest

from chartgeom import ChartConfig, InvalidScaleError
from chartgeom.scales import (
    BandScale,
    ColorScale,
    LinearScale,
    PointScale,
    ScaleDomainBuilder,
    tick_increment,
    unique_keys,
)


class TestLinearScale:
    """Tests for the linear measure scale."""

    def test_maps_domain_to_range(self):
        scale = LinearScale((0, 10), (0, 200))
        assert scale(5) == 100
        assert scale.invert(100) == 5

    def test_nice_rounds_outward(self):
        assert LinearScale((0, 97)).nice().domain == (0, 100)
        assert LinearScale((0, 0.97)).nice().domain == (0, 1.0)

    def test_nice_keeps_reversed_domain_reversed(self):
        assert LinearScale((97, 0)).nice().domain == (100, 0)

    def test_zero_width_domain_is_zero_length(self):
        scale = LinearScale((5, 5), (0, 100))
        assert scale(5) == 0
        assert scale(50) == 0

    def test_ticks(self):
        assert LinearScale((0, 100)).ticks(10) == [float(v) for v in range(0, 101, 10)]
        assert LinearScale((0, 1)).ticks(5) == [0.0, 0.2, 0.4, 0.6, 0.8, 1.0]

    def test_tick_increment_uses_1_2_5_steps(self):
        assert tick_increment(0, 100, 10) == 10
        assert tick_increment(0, 50, 10) == 5
        assert tick_increment(0, 1, 5) == -5

    def test_clamp(self):
        scale = LinearScale((0, 10), (0, 100), clamp=True)
        assert scale(20) == 100
        assert scale(-5) == 0


class TestBandScale:
    """Tests for band and point scales."""

    def test_band_padding(self):
        scale = BandScale(["a", "b", "c"], (0, 100), padding_inner=0.1, padding_outer=0.1)
        assert scale.step == pytest.approx(100 / 3.1)
        assert scale.bandwidth == pytest.approx(scale.step * 0.9)
        left = scale("a")
        assert left == pytest.approx((100 - scale.step * 2.9) / 2)
        assert 100 - (scale("c") + scale.bandwidth) == pytest.approx(left)

    def test_unknown_key(self):
        scale = BandScale(["a"], (0, 10))
        assert scale("zzz") is None
        assert "a" in scale

    def test_duplicate_domain_entries_collapse(self):
        assert BandScale(["a", "b", "a"], (0, 10)).domain == ["a", "b"]

    def test_reversed_range(self):
        scale = BandScale(["a", "b"], (100, 0))
        assert scale("a") > scale("b")

    def test_point_scale_single_key_is_centered(self):
        assert PointScale(["only"], (0, 400), padding=0.3)("only") == 200

    def test_point_scale_positions(self):
        scale = PointScale(["from", "to"], (0, 400), padding=0.3)
        assert scale.step == pytest.approx(250)
        assert scale("from") == pytest.approx(75)
        assert scale("to") == pytest.approx(325)
        assert scale.bandwidth == 0


class TestColorScale:
    """Tests for the cyclic color scale."""

    def test_cycles_palette(self):
        color = ColorScale(["a", "b", "c", "d"], ["red", "green", "blue"])
        assert [color(k) for k in "abcd"] == ["red", "green", "blue", "red"]

    def test_unknown_keys_extend_domain_in_call_order(self):
        color = ColorScale(["a"], ["red", "green"])
        assert color("z") == "green"
        assert color.domain == ["a", "z"]

    def test_empty_palette(self):
        with pytest.raises(InvalidScaleError):
            ColorScale(["a"], [])


class TestScaleDomainBuilder:
    """Tests for per-render scale construction."""

    records = [
        {"name": "b", "value": 10},
        {"name": "a", "value": 97},
        {"name": "b", "value": 3},
    ]

    def test_unique_keys_first_seen(self):
        assert unique_keys(self.records, "name") == ["b", "a"]

    def test_category_scale(self):
        scale = ScaleDomainBuilder().category_scale(self.records, "name", 300)
        assert scale.domain == ["b", "a"]
        assert scale("b") < scale("a")

    def test_measure_scale_is_niced_and_inverted(self):
        scale = ScaleDomainBuilder().measure_scale(self.records, "value", 200, invert=True)
        assert scale.domain == (0, 100)
        assert scale(0) == 200
        assert scale(100) == 0

    def test_measure_scale_uses_config_value_field(self):
        config = ChartConfig(value_field="amount")
        scale = ScaleDomainBuilder(config).measure_scale([{"amount": 40}], None, 100)
        assert scale.domain == (0, 40)

    def test_measure_scale_all_zero(self):
        scale = ScaleDomainBuilder().measure_scale([{"value": 0}], "value", 100)
        assert scale(0) == 0

    def test_color_scale_uses_config_palette(self):
        config = ChartConfig(color_palette=("#111", "#222"))
        color = ScaleDomainBuilder(config).color_scale(["x", "y", "z"])
        assert color("z") == "#111"

    def test_pure(self):
        first = ScaleDomainBuilder().measure_scale(self.records, "value", 120)
        second = ScaleDomainBuilder().measure_scale(self.records, "value", 120)
        assert first.domain == second.domain
        assert [first(v) for v in (0, 50, 100)] == [second(v) for v in (0, 50, 100)]
