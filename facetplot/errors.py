from __future__ import annotations


class FacetPlotError(Exception):
    """Base class for all facetplot errors."""


class ScaleConfigError(FacetPlotError, ValueError):
    """A scale was configured or used in a way that can never work."""


class PlotConfigError(FacetPlotError, ValueError):
    """A chart, panel or geom was configured with an invalid value."""


class PlotDataError(FacetPlotError, ValueError):
    """Input data handed to a geom has the wrong shape or type."""
