from facetplot.api import plot
from facetplot.canvas import Canvas, DrawCall, RasterCanvas, RecordingCanvas, Rect
from facetplot.diagnostics import Diagnostics
from facetplot.errors import FacetPlotError, PlotConfigError, PlotDataError, ScaleConfigError
from facetplot.facet import Plot
from facetplot.geom import (
    Aesthetics,
    Bar,
    BarGroups,
    Boxplot,
    Geom,
    HLine,
    Line,
    Path,
    Point,
    Rectangle,
    Segment,
    Step,
    Text,
    VLine,
    new_data_ranges,
)
from facetplot.group import Partitioner
from facetplot.interval import Interval
from facetplot.palette import GradientColorMap, Rainbow, extended_black_body, kindlmann
from facetplot.panel import Panel
from facetplot.scale import Aes, Autoscaling, Expand, Scale, ScaleType
from facetplot.style import Style, default_style, load_style, style_from_mapping
from facetplot.trans import (
    IDENTITY_TRANS,
    LINEAR_TRANS,
    LOG10_TRANS,
    SQRT_TRANS,
    SQRT_TRANS_FIX0,
    Transformation,
    get_transformation,
)

__all__ = [
    "IDENTITY_TRANS",
    "LINEAR_TRANS",
    "LOG10_TRANS",
    "SQRT_TRANS",
    "SQRT_TRANS_FIX0",
    "Aes",
    "Aesthetics",
    "Autoscaling",
    "Bar",
    "BarGroups",
    "Boxplot",
    "Canvas",
    "Diagnostics",
    "DrawCall",
    "Expand",
    "FacetPlotError",
    "Geom",
    "GradientColorMap",
    "HLine",
    "Interval",
    "Line",
    "Panel",
    "Partitioner",
    "Path",
    "Plot",
    "PlotConfigError",
    "PlotDataError",
    "Point",
    "Rainbow",
    "RasterCanvas",
    "RecordingCanvas",
    "Rect",
    "Rectangle",
    "Scale",
    "ScaleConfigError",
    "ScaleType",
    "Segment",
    "Step",
    "Style",
    "Text",
    "Transformation",
    "VLine",
    "default_style",
    "extended_black_body",
    "get_transformation",
    "kindlmann",
    "load_style",
    "new_data_ranges",
    "plot",
    "style_from_mapping",
]
