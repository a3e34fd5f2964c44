from __future__ import annotations

from decimal import Decimal
import logging
import math
import unittest

import numpy as np

from facetplot.adapters import as_float_array, check_lengths
from facetplot.diagnostics import Diagnostics
from facetplot.errors import FacetPlotError, PlotDataError
from facetplot.group import Partitioner


class AdapterTests(unittest.TestCase):
    def test_sequences_and_arrays(self) -> None:
        out = as_float_array([1, None, Decimal("2.5")], label="x")
        self.assertEqual(out.dtype, np.float64)
        self.assertEqual(out[0], 1.0)
        self.assertTrue(math.isnan(out[1]))
        self.assertEqual(out[2], 2.5)
        np.testing.assert_array_equal(as_float_array(np.arange(3), label="x"), [0.0, 1.0, 2.0])

    def test_rejects_bad_input(self) -> None:
        with self.assertRaises(PlotDataError):
            as_float_array(np.zeros((2, 2)), label="x")
        with self.assertRaises(PlotDataError):
            as_float_array("123", label="x")
        with self.assertRaisesRegex(PlotDataError, "non-numeric value at index 1"):
            as_float_array([1, "a"], label="y")

    def test_check_lengths(self) -> None:
        self.assertEqual(check_lengths(x=np.zeros(3), y=np.zeros(3), u=None), 3)
        with self.assertRaisesRegex(PlotDataError, "x and y length mismatch: 3 != 2"):
            check_lengths(x=np.zeros(3), y=np.zeros(2))

    def test_errors_share_a_base(self) -> None:
        self.assertTrue(issubclass(PlotDataError, FacetPlotError))
        self.assertTrue(issubclass(PlotDataError, ValueError))


class DiagnosticsTests(unittest.TestCase):
    def test_verbosity_gates_debug_output(self) -> None:
        logger = logging.getLogger("facetplot.test.diagnostics")
        diag = Diagnostics(verbosity=2, logger=logger)
        with self.assertLogs(logger, level="DEBUG") as logs:
            diag.v("one %d", 1)
            diag.vv("two")
            diag.vvv("three")
        self.assertEqual([r.getMessage() for r in logs.records], ["one 1", "two"])

    def test_warnings_are_collected_and_logged(self) -> None:
        logger = logging.getLogger("facetplot.test.diagnostics")
        diag = Diagnostics(logger=logger)
        with self.assertLogs(logger, level="WARNING"):
            diag.warn("scale %s broken", "X")
        self.assertEqual(diag.warnings, ["scale X broken"])


class PartitionerTests(unittest.TestCase):
    def _partitioner(self) -> Partitioner:
        p = Partitioner(4)
        p.learn(0, 10, 40, math.nan)
        return p

    def test_bins(self) -> None:
        p = self._partitioner()
        self.assertEqual(p.partition(0), "[0, 10)")
        self.assertEqual(p.partition(25), "[20, 30)")
        self.assertEqual(p.partition(39.9), "[30, 40)")

    def test_open_ended_bins(self) -> None:
        p = self._partitioner()
        self.assertEqual(p.partition(-1), "(-∞, 0)")
        self.assertEqual(p.partition(40), "[40, ∞)")
        self.assertEqual(p.partition(math.nan), "NaN")

    def test_labels(self) -> None:
        self.assertEqual(self._partitioner().labels(), ["[0, 10)", "[10, 20)", "[20, 30)", "[30, 40)"])
        self.assertEqual(Partitioner(3).labels(), [])
        self.assertEqual(Partitioner(3).partition(1), "NaN")

    def test_partitions_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            Partitioner(0)


if __name__ == "__main__":
    unittest.main()
