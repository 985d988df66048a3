"""Path-geometry engine: smoothing, simplification and anchor normalization."""

from anchorpoint.fitting import FitResult, fit_cubic, line_control_points
from anchorpoint.normalize import AnchorNormalizer
from anchorpoint.simplify import optimize, simplify
from anchorpoint.smooth import smooth

__all__ = [
    "AnchorNormalizer",
    "FitResult",
    "fit_cubic",
    "line_control_points",
    "optimize",
    "simplify",
    "smooth",
]
