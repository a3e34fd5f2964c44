from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from facetplot.errors import PlotConfigError
from facetplot.style import Style, default_style, load_style, parse_color, style_from_mapping


class DefaultStyleTests(unittest.TestCase):
    def test_font_sizes_follow_base(self) -> None:
        style = default_style(12)
        self.assertEqual(style.x_axis.title.size_px, 12)
        self.assertEqual(style.title.size_px, 14)
        self.assertEqual(style.x_axis.label.size_px, 10)
        self.assertEqual(style.v_strip.text.rotate_deg, 270)
        self.assertEqual(style.y_axis.title.rotate_deg, 90)

    def test_bigger_base_gives_bigger_strips(self) -> None:
        self.assertGreater(default_style(24).h_strip.size, default_style(12).h_strip.size)

    def test_invalid_base_raises(self) -> None:
        with self.assertRaises(ValueError):
            default_style(0)

    def test_panel_defaults(self) -> None:
        style = Style()
        self.assertEqual(style.panel.background, (235, 235, 235, 255))
        self.assertEqual(style.x_axis.expand_relative, 0.05)


class StyleOverrideTests(unittest.TestCase):
    def test_nested_override_keeps_other_fields(self) -> None:
        base = default_style()
        style = style_from_mapping({"legend": {"discrete_size": 30}}, base=base)
        self.assertEqual(style.legend.discrete_size, 30.0)
        self.assertIsInstance(style.legend.discrete_size, float)
        self.assertEqual(style.legend.continuous_length, base.legend.continuous_length)
        self.assertEqual(style.x_axis, base.x_axis)

    def test_colors_and_dashes(self) -> None:
        style = style_from_mapping(
            {
                "x_axis": {"title": {"color": "#ff000080"}},
                "grid": {"minor": {"dashes": [2, 2]}},
                "legend": {"swatch_background": [1, 2, 3]},
            }
        )
        self.assertEqual(style.x_axis.title.color, (255, 0, 0, 128))
        self.assertEqual(style.grid.minor.dashes, (2, 2))
        self.assertEqual(style.legend.swatch_background, (1, 2, 3, 255))

    def test_empty_overrides_return_base(self) -> None:
        base = default_style(10)
        self.assertIs(style_from_mapping({}, base=base), base)

    def test_unknown_key_raises(self) -> None:
        with self.assertRaisesRegex(PlotConfigError, r"style\.legend\.bogus"):
            style_from_mapping({"legend": {"bogus": 1}})

    def test_section_must_be_table(self) -> None:
        with self.assertRaisesRegex(PlotConfigError, "must be a table"):
            style_from_mapping({"legend": 3})

    def test_number_type_is_checked(self) -> None:
        with self.assertRaisesRegex(PlotConfigError, "must be a number"):
            style_from_mapping({"legend": {"discrete_size": "big"}})
        with self.assertRaisesRegex(PlotConfigError, "must be a number"):
            style_from_mapping({"legend": {"discrete_size": True}})

    def test_boolean_type_is_checked(self) -> None:
        with self.assertRaisesRegex(PlotConfigError, "must be a boolean"):
            style_from_mapping({"legend": {"tick_mirror": 1}})


class ParseColorTests(unittest.TestCase):
    def test_hex(self) -> None:
        self.assertEqual(parse_color("#00ff00"), (0, 255, 0, 255))
        self.assertEqual(parse_color("#0000FF7f"), (0, 0, 255, 127))

    def test_sequences(self) -> None:
        self.assertEqual(parse_color([1, 2, 3]), (1, 2, 3, 255))
        self.assertEqual(parse_color((1, 2, 3, 4)), (1, 2, 3, 4))

    def test_invalid(self) -> None:
        for bad in ("red", "#12345", [0, 0, 300], [1, 2], 7):
            with self.subTest(value=bad):
                with self.assertRaises(PlotConfigError):
                    parse_color(bad)

    def test_errors_are_value_errors(self) -> None:
        with self.assertRaises(ValueError):
            parse_color("nope")


class LoadStyleTests(unittest.TestCase):
    def test_load_toml(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "style.toml"
            path.write_text(
                'base_font_px = 20\n\n[panel]\nbackground = "#ffffff"\n\n[grid.major]\nwidth = 2\n',
                encoding="utf-8",
            )
            style = load_style(path)
        self.assertEqual(style.x_axis.title.size_px, 20)
        self.assertEqual(style.panel.background, (255, 255, 255, 255))
        self.assertEqual(style.grid.major.width, 2.0)

    def test_missing_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                load_style(Path(td) / "missing.toml")

    def test_unknown_key_in_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "style.toml"
            path.write_text("[panel]\ncolour = 1\n", encoding="utf-8")
            with self.assertRaises(PlotConfigError):
                load_style(path)


if __name__ == "__main__":
    unittest.main()
