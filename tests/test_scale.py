from __future__ import annotations

import math
import unittest

from facetplot.errors import ScaleConfigError
from facetplot.interval import Interval
from facetplot.palette import GRAY50, Rainbow
from facetplot.scale import Aes, Expand, Scale, ScaleType
from facetplot.ticks import DiscreteTicker
from facetplot.trans import LINEAR_TRANS, LOG10_TRANS, SQRT_TRANS


def _linear_scale(aes: Aes, vmin: float, vmax: float, *, relative: float = 0.0, absolute: float = 0.0) -> Scale:
    scale = Scale(aes, trans=LINEAR_TRANS)
    scale.autoscaling.expand = Expand(absolute=absolute, relative=relative)
    scale.update_data(Interval(vmin, vmax))
    return scale


class ScaleAutoscaleTests(unittest.TestCase):
    def test_limit_equals_data_without_expansion(self) -> None:
        scale = _linear_scale(Aes.X, 2, 8)
        scale.autoscale()
        self.assertEqual((scale.limit.min, scale.limit.max), (2, 8))

    def test_relative_expansion_uses_inverse_transform(self) -> None:
        scale = _linear_scale(Aes.X, 10, 30, relative=0.05)
        scale.autoscale()
        self.assertAlmostEqual(scale.limit.min, 9)
        self.assertAlmostEqual(scale.limit.max, 31)

    def test_absolute_expansion(self) -> None:
        scale = _linear_scale(Aes.Y, 0, 10, absolute=2)
        scale.autoscale()
        self.assertEqual((scale.limit.min, scale.limit.max), (-2, 12))

    def test_autoscale_recomputes_from_data(self) -> None:
        scale = _linear_scale(Aes.X, 10, 30, relative=0.05)
        scale.autoscale()
        scale.autoscale()
        self.assertAlmostEqual(scale.limit.min, 9)
        self.assertAlmostEqual(scale.limit.max, 31)

    def test_pinned_min_edge(self) -> None:
        scale = _linear_scale(Aes.X, 2, 8, relative=0.1)
        scale.fix_min(5)
        scale.autoscale()
        self.assertEqual(scale.limit.min, 5)
        self.assertAlmostEqual(scale.limit.max, 8.6)

    def test_pinned_max_edge(self) -> None:
        scale = _linear_scale(Aes.Y, 2, 8)
        scale.fix_max(100)
        scale.autoscale()
        self.assertEqual((scale.limit.min, scale.limit.max), (2, 100))

    def test_floating_edge_is_clamped(self) -> None:
        scale = _linear_scale(Aes.X, 2, 8)
        scale.autoscaling.min_range = Interval(0, 1)
        scale.autoscaling.max_range = Interval(10, 20)
        scale.autoscale()
        self.assertEqual((scale.limit.min, scale.limit.max), (1, 10))

    def test_nan_bounds_do_not_clamp(self) -> None:
        scale = _linear_scale(Aes.X, 2, 8)
        scale.autoscaling.min_range = Interval(math.nan, 5)
        scale.autoscale()
        self.assertEqual(scale.limit.min, 2)

    def test_no_data_leaves_limit_unset(self) -> None:
        scale = Scale(Aes.X, trans=LINEAR_TRANS)
        scale.autoscale()
        self.assertTrue(scale.limit.is_unset())
        self.assertFalse(scale.has_data())

    def test_discrete_scale_ignores_relative_expansion(self) -> None:
        scale = _linear_scale(Aes.COLOR, 0, 3, relative=0.5, absolute=0.5)
        scale.set_scale_type(ScaleType.DISCRETE)
        scale.autoscale()
        self.assertEqual((scale.limit.min, scale.limit.max), (-0.5, 3.5))

    def test_log_expansion_is_multiplicative(self) -> None:
        scale = _linear_scale(Aes.Y, 1, 100, relative=0.5)
        scale.set_scale_type(ScaleType.LOGARITHMIC)
        self.assertIs(scale.trans, LOG10_TRANS)
        scale.autoscale()
        self.assertAlmostEqual(scale.limit.min, 0.1)
        self.assertAlmostEqual(scale.limit.max, 1000)

    def test_reset_forgets_learned_intervals(self) -> None:
        scale = _linear_scale(Aes.X, 2, 8)
        scale.autoscale()
        scale.fill_range()
        scale.reset()
        self.assertTrue(scale.data.is_unset())
        self.assertTrue(scale.limit.is_unset())
        self.assertTrue(scale.range.is_unset())


class ScaleRangeTests(unittest.TestCase):
    def test_range_defaults_to_limit(self) -> None:
        scale = _linear_scale(Aes.X, 10, 30)
        scale.autoscale()
        scale.fill_range()
        self.assertTrue(scale.range.equal(scale.limit))

    def test_fixed_edge_overrides_limit(self) -> None:
        scale = _linear_scale(Aes.X, 10, 30)
        scale.set_range(vmax=45)
        scale.autoscale()
        scale.fill_range()
        self.assertEqual((scale.range.min, scale.range.max), (10, 45))


class ScaleMappingTests(unittest.TestCase):
    def test_map_onto_unit_interval(self) -> None:
        scale = _linear_scale(Aes.ALPHA, 0, 10)
        scale.autoscale()
        self.assertAlmostEqual(scale.map(5), 0.5)
        self.assertAlmostEqual(scale.map(20), 2.0)

    def test_map_of_degenerate_limit_is_nan(self) -> None:
        scale = _linear_scale(Aes.ALPHA, 3, 3)
        scale.autoscale()
        self.assertTrue(math.isnan(scale.map(3)))

    def test_map_alpha_outside_unit_is_nan(self) -> None:
        scale = _linear_scale(Aes.ALPHA, 0, 10)
        scale.autoscale()
        self.assertAlmostEqual(scale.map_alpha(2.5), 0.25)
        self.assertTrue(math.isnan(scale.map_alpha(11)))

    def test_constant_alpha_is_half_opaque(self) -> None:
        scale = _linear_scale(Aes.ALPHA, 3, 3)
        scale.autoscale()
        self.assertEqual(scale.map_alpha(3), 0.5)
        self.assertTrue(math.isnan(scale.map_alpha(4)))

    def test_in_range(self) -> None:
        scale = _linear_scale(Aes.X, 0, 10)
        self.assertFalse(scale.in_range(5))
        scale.autoscale()
        self.assertTrue(scale.in_range(5))
        self.assertFalse(scale.in_range(math.nan))


class ScaleColorTests(unittest.TestCase):
    def _color_scale(self) -> Scale:
        scale = _linear_scale(Aes.COLOR, 0, 10)
        scale.color_map = Rainbow()
        scale.autoscale()
        return scale

    def test_edges_map_to_color_map_edges(self) -> None:
        scale = self._color_scale()
        self.assertEqual(scale.map_color(0), Rainbow().at(0))
        self.assertEqual(scale.map_color(10), Rainbow().at(1))
        self.assertEqual(scale.map_color(5), Rainbow().at(0.5))

    def test_out_of_range_is_gray(self) -> None:
        scale = self._color_scale()
        self.assertEqual(scale.map_color(20), GRAY50)
        self.assertEqual(scale.map_color(math.nan), GRAY50)

    def test_constant_scale_uses_middle_color(self) -> None:
        scale = _linear_scale(Aes.COLOR, 5, 5)
        scale.color_map = Rainbow()
        scale.autoscale()
        self.assertEqual(scale.map_color(5), Rainbow().at(0.5))
        self.assertEqual(scale.map_color(6), GRAY50)

    def test_non_color_scale_raises(self) -> None:
        scale = _linear_scale(Aes.SIZE, 0, 10)
        with self.assertRaises(ScaleConfigError):
            scale.map_color(5)

    def test_missing_color_map_raises(self) -> None:
        scale = _linear_scale(Aes.FILL, 0, 10)
        scale.autoscale()
        with self.assertRaisesRegex(ScaleConfigError, "no color map"):
            scale.map_color(5)


class ScaleSizeTests(unittest.TestCase):
    def test_size_map_is_used_inside_limit(self) -> None:
        scale = Scale(Aes.SIZE, trans=SQRT_TRANS)
        scale.update_data(Interval(0, 100))
        scale.autoscale()
        scale.fill_range()
        scale.size_map = lambda v: float(SQRT_TRANS.trans(scale.range, Interval(2, 10), v))
        self.assertAlmostEqual(scale.map_size(0), 2)
        self.assertAlmostEqual(scale.map_size(100), 10)

    def test_outside_limit_is_zero(self) -> None:
        scale = Scale(Aes.SIZE, size_map=lambda v: 3.0)
        scale.update_data(Interval(0, 1))
        scale.autoscale()
        self.assertEqual(scale.map_size(5), 0.0)

    def test_non_size_scale_raises(self) -> None:
        with self.assertRaises(ScaleConfigError):
            Scale(Aes.COLOR).map_size(1)

    def test_missing_size_map_raises(self) -> None:
        with self.assertRaises(ScaleConfigError):
            Scale(Aes.SIZE).map_size(1)


class ScaleTypeTests(unittest.TestCase):
    def test_shape_and_stroke_are_discrete(self) -> None:
        self.assertIs(Scale(Aes.SHAPE).scale_type, ScaleType.DISCRETE)
        self.assertIs(Scale(Aes.STROKE).scale_type, ScaleType.DISCRETE)

    def test_shape_cannot_become_continuous(self) -> None:
        with self.assertRaises(ScaleConfigError):
            Scale(Aes.SHAPE).set_scale_type(ScaleType.LINEAR)

    def test_discrete_uses_discrete_ticks_with_values(self) -> None:
        scale = Scale(Aes.COLOR, values=("a", "b", "c"))
        scale.set_scale_type(ScaleType.DISCRETE)
        self.assertEqual(scale.ticker, DiscreteTicker(("a", "b", "c")))
        scale.update_data(Interval(0, 2))
        scale.autoscale()
        self.assertEqual([t.label for t in scale.ticks()], ["a", "b", "c"])

    def test_labels(self) -> None:
        self.assertEqual(Aes.COLOR.label, "Color-Scale")
        self.assertIn("Limit=", str(Scale(Aes.X)))


if __name__ == "__main__":
    unittest.main()
