from __future__ import annotations

import math
import unittest

import numpy as np

from facetplot.canvas import RecordingCanvas, Rect
from facetplot.errors import PlotConfigError, PlotDataError
from facetplot.facet import Plot
from facetplot.geom import (
    Aesthetics,
    Bar,
    BarGroups,
    Boxplot,
    HLine,
    Line,
    Point,
    Rectangle,
    Segment,
    Step,
    Text,
    VLine,
    clip_segment,
    new_data_ranges,
)
from facetplot.palette import dashes
from facetplot.scale import Aes
from facetplot.style import LineStyle


def _rect_columns(r: Rectangle) -> list[list[float]]:
    return [r.x.tolist(), r.y.tolist(), r.u.tolist(), r.v.tolist()]


class AestheticsTests(unittest.TestCase):
    def test_from_values_looks_up_elements(self) -> None:
        aes = Aesthetics.from_values(color=[1, 2, 3], shape=[0, 4, 7])
        self.assertEqual(aes.color(1), 2.0)
        self.assertEqual(aes.shape(2), 7)
        self.assertIsNone(aes.fill)

    def test_unknown_aesthetic_raises(self) -> None:
        with self.assertRaises(PlotConfigError):
            Aesthetics.from_values(colour=[1])

    def test_missing_discrete_value_is_none(self) -> None:
        aes = Aesthetics.from_values(stroke=[0, None], shape=[math.nan, 2])
        self.assertIsNone(aes.stroke(1))
        self.assertIsNone(aes.shape(0))
        dr = new_data_ranges()
        aes.update_ranges(dr, 2)
        self.assertEqual((dr[Aes.SHAPE].min, dr[Aes.SHAPE].max), (2, 2))
        self.assertEqual((dr[Aes.STROKE].min, dr[Aes.STROKE].max), (0, 0))

    def test_reindexed_and_restricted(self) -> None:
        aes = Aesthetics.from_values(color=[1, 2, 3], fill=[4, 5, 6])
        self.assertEqual(aes.reindexed(lambda i: 2 - i).color(0), 3.0)
        only_color = aes.restricted("color")
        self.assertIsNotNone(only_color.color)
        self.assertIsNone(only_color.fill)

    def test_update_ranges(self) -> None:
        dr = new_data_ranges()
        Aesthetics.from_values(size=[3, 1, 2]).update_ranges(dr, 3)
        self.assertEqual((dr[Aes.SIZE].min, dr[Aes.SIZE].max), (1, 3))
        self.assertTrue(dr[Aes.COLOR].is_unset())


class DataRangeTests(unittest.TestCase):
    def test_point_ranges_skip_nan(self) -> None:
        dr = Point([1, None, 3], [5, 6, math.nan], aes=Aesthetics.from_values(fill=[1, 2, 3])).data_ranges()
        self.assertEqual((dr[Aes.X].min, dr[Aes.X].max), (1, 3))
        self.assertEqual((dr[Aes.Y].min, dr[Aes.Y].max), (5, 6))
        # Points have no fill.
        self.assertTrue(dr[Aes.FILL].is_unset())

    def test_rectangle_ranges_cover_both_corners(self) -> None:
        dr = Rectangle([0], [1], [5], [-2]).data_ranges()
        self.assertEqual((dr[Aes.X].min, dr[Aes.X].max), (0, 5))
        self.assertEqual((dr[Aes.Y].min, dr[Aes.Y].max), (-2, 1))

    def test_hline_and_vline_touch_one_axis(self) -> None:
        dr = HLine([2, 4]).data_ranges()
        self.assertTrue(dr[Aes.X].is_unset())
        self.assertEqual((dr[Aes.Y].min, dr[Aes.Y].max), (2, 4))
        dr = VLine([7]).data_ranges()
        self.assertEqual((dr[Aes.X].min, dr[Aes.X].max), (7, 7))
        self.assertTrue(dr[Aes.Y].is_unset())

    def test_length_mismatch_raises(self) -> None:
        with self.assertRaisesRegex(PlotDataError, "length mismatch"):
            Point([1, 2], [1])
        with self.assertRaises(PlotDataError):
            Text([1], [1], ["a", "b"])


class BarTests(unittest.TestCase):
    def test_stack(self) -> None:
        rects = Bar([1, 1, 2], [2, 3, 4]).rects()
        np.testing.assert_allclose(
            _rect_columns(rects),
            [[0.6, 0.6, 1.6], [0, 2, 0], [1.4, 1.4, 2.4], [2, 5, 4]],
        )

    def test_stack_separates_negative_values(self) -> None:
        rects = Bar([1, 1], [-1, 2]).rects()
        np.testing.assert_allclose([rects.y.tolist(), rects.v.tolist()], [[0, 0], [-1, 2]])

    def test_dodge(self) -> None:
        rects = Bar([1, 1, 2], [2, 3, 4], position="dodge").rects()
        np.testing.assert_allclose(
            _rect_columns(rects),
            [[0.6, 1.0, 1.8], [0, 0, 0], [1.0, 1.4, 2.2], [2, 3, 4]],
        )

    def test_fill(self) -> None:
        rects = Bar([1, 1, 2], [2, 3, 4], position="fill").rects()
        np.testing.assert_allclose([rects.y.tolist(), rects.v.tolist()], [[0, 0.4, 0], [0.4, 1, 1]])

    def test_unknown_position_raises(self) -> None:
        with self.assertRaises(PlotConfigError):
            Bar([1], [1], position="jitter")

    def test_data_ranges_include_bar_width(self) -> None:
        dr = Bar([1, 1, 2], [2, 3, 4]).data_ranges()
        self.assertAlmostEqual(dr[Aes.X].min, 0.6)
        self.assertAlmostEqual(dr[Aes.X].max, 2.4)
        self.assertEqual((dr[Aes.Y].min, dr[Aes.Y].max), (0, 5))

    def test_groups_min_delta(self) -> None:
        g = BarGroups()
        self.assertEqual(g.min_delta(), 0.0)
        g.record(3, 0)
        self.assertEqual(g.min_delta(), 1.0)
        g.record(5, 1)
        g.record(4, 2)
        self.assertEqual(g.min_delta(), 1.0)
        self.assertEqual(g.xs(), [3.0, 4.0, 5.0])


class PathGeomTests(unittest.TestCase):
    def test_line_sorts_by_x_and_keeps_aesthetics(self) -> None:
        path = Line([3, 1, 2], [30, 10, 20], aes=Aesthetics.from_values(color=[3, 1, 2])).to_path()
        self.assertEqual(path.x.tolist(), [1, 2, 3])
        self.assertEqual(path.y.tolist(), [10, 20, 30])
        self.assertEqual([path.aes.color(i) for i in range(3)], [1, 2, 3])

    def test_step_horizontal_first(self) -> None:
        path = Step([0, 1, 2], [0, 1, 2]).to_path()
        self.assertEqual(path.x.tolist(), [0, 1, 1, 2, 2])
        self.assertEqual(path.y.tolist(), [0, 0, 1, 1, 2])

    def test_step_vertical_first(self) -> None:
        path = Step([2, 0, 1], [2, 0, 1], vertical=True, aes=Aesthetics.from_values(size=[20, 0, 10])).to_path()
        self.assertEqual(path.x.tolist(), [0, 0, 1, 1, 2])
        self.assertEqual(path.y.tolist(), [0, 1, 1, 2, 2])
        self.assertEqual([path.aes.size(i) for i in range(4)], [0, 0, 10, 10])

    def test_clip_segment(self) -> None:
        rect = Rect(0, 0, 10, 10)
        self.assertEqual(clip_segment((-5, 5), (15, 5), rect), ((0, 5), (10, 5)))
        self.assertEqual(clip_segment((1, 1), (2, 2), rect), ((1, 1), (2, 2)))
        self.assertIsNone(clip_segment((-5, -5), (-1, 20), rect))
        self.assertIsNone(clip_segment((math.nan, 1), (2, 2), rect))


class BoxplotTests(unittest.TestCase):
    def _boxplot(self) -> Boxplot:
        return Boxplot(
            x=[1, 2],
            min=[0, 0],
            q1=[1, 1],
            median=[2, 2],
            q3=[3, 3],
            max=[4, 4],
            outliers=[[10], []],
            aes=Aesthetics.from_values(color=[5, 6]),
        )

    def test_parts(self) -> None:
        rect, segment, point = self._boxplot().parts()
        np.testing.assert_allclose(rect.x, [0.6, 1.6])
        np.testing.assert_allclose(rect.u, [1.4, 2.4])
        self.assertEqual(len(segment), 6)
        self.assertEqual(segment.aes.color(4), 6)
        np.testing.assert_allclose([segment.x[1], segment.y[1], segment.v[1]], [1, 0, 1])
        self.assertEqual(point.x.tolist(), [1])
        self.assertEqual(point.y.tolist(), [10])
        self.assertEqual(point.aes.color(0), 5)

    def test_data_ranges_include_outliers(self) -> None:
        dr = self._boxplot().data_ranges()
        self.assertEqual((dr[Aes.Y].min, dr[Aes.Y].max), (0, 10))
        self.assertAlmostEqual(dr[Aes.X].min, 0.6)
        self.assertAlmostEqual(dr[Aes.X].max, 2.4)

    def test_outlier_count_mismatch_raises(self) -> None:
        with self.assertRaises(PlotDataError):
            Boxplot([1], [0], [1], [2], [3], [4], outliers=[[], []])


class GeomDrawTests(unittest.TestCase):
    def _draw(self, *geoms: object) -> tuple[Plot, RecordingCanvas]:
        p = Plot()
        p.add(Point([0, 10], [0, 10]), *geoms)
        canvas = RecordingCanvas()
        p.draw(canvas)
        return p, canvas

    def test_hline_spans_the_panel(self) -> None:
        style = LineStyle(color=(1, 2, 3, 255), width=1)
        p, canvas = self._draw(HLine([5], style=style))
        strokes = [c.args[0] for c in canvas.ops("stroke_path") if c.args[1].color == style.color]
        self.assertEqual(len(strokes), 1)
        (xa, ya), (xb, yb) = strokes[0]
        rect = p.panel().rect
        self.assertAlmostEqual(xa, rect.x0)
        self.assertAlmostEqual(xb, rect.x1)
        self.assertAlmostEqual(ya, yb)

    def test_unfilled_rectangle_gets_a_border(self) -> None:
        _, canvas = self._draw(Rectangle([2], [2], [4], [4]))
        borders = [c for c in canvas.ops("stroke_path") if c.args[1].color == (0, 0, 16, 255)]
        self.assertEqual(len(borders), 1)
        self.assertEqual(borders[0].args[1].width, 2)

    def test_alpha_is_applied_to_glyphs(self) -> None:
        p, canvas = self._draw(Point([1, 9], [1, 9], aes=Aesthetics.from_values(alpha=[0, 10])))
        glyphs = [c.args[1] for c in canvas.ops("draw_glyph")]
        # Legend swatches are drawn with a different radius.
        alphas = sorted(g.color[3] for g in glyphs if g.radius == p.style.geom_default.size)
        self.assertEqual(alphas, [0, 255, 255, 255])

    def test_points_with_nan_are_skipped(self) -> None:
        _, canvas = self._draw(Point([5, None], [5, 5]))
        self.assertEqual(len(canvas.ops("draw_glyph")), 3)

    def test_point_without_shape_is_skipped(self) -> None:
        p, canvas = self._draw(Point([1, 2, 3], [1, 2, 3], aes=Aesthetics.from_values(shape=[0, math.nan, 1])))
        glyphs = [c.args[1] for c in canvas.ops("draw_glyph") if c.args[1].radius == p.style.geom_default.size]
        self.assertEqual(sorted(g.shape for g in glyphs), ["circle", "circle", "circle", "square"])

    def test_missing_stroke_skips_the_element(self) -> None:
        style = LineStyle(color=(1, 2, 3, 255), width=1)
        aes = Aesthetics.from_values(stroke=[2, None])
        _, canvas = self._draw(Segment([1, 2], [1, 2], [5, 6], [5, 6], aes=aes, style=style))
        strokes = [c.args[1] for c in canvas.ops("stroke_path") if c.args[1].color == style.color]
        self.assertEqual([s.dashes for s in strokes], [dashes(2)])

        _, canvas = self._draw(Rectangle([2, 5], [2, 5], [4, 7], [4, 7], aes=Aesthetics.from_values(stroke=[None, 1])))
        borders = [c.args[1] for c in canvas.ops("stroke_path") if c.args[1].color == (0, 0, 16, 255)]
        self.assertEqual([b.dashes for b in borders], [dashes(1)])

    def test_text_is_centred(self) -> None:
        _, canvas = self._draw(Text([5], [5], ["hello"]))
        calls = [c for c in canvas.ops("fill_text") if c.args[1] == "hello"]
        self.assertEqual(len(calls), 1)
        style = calls[0].args[2]
        self.assertEqual((style.x_align, style.y_align), (0.5, 0.5))


if __name__ == "__main__":
    unittest.main()
