"""Central module containing constants and default settings"""

from __future__ import annotations

import numpy as np

# Number of linear intervals used to sample a curve for its arc length
DEFAULT_CURVE_INTERVALS: int = 30

# Closest-parameter search stops once the bracketing curve points are this close (coordinate units)
CLOSEST_T_EPSILON: float = 1.0
CLOSEST_T_MAX_ITERATIONS: int = 4

# A Thomas sweep pivot at or below this fraction of the magnitude of its terms is treated as zero
PIVOT_EPSILON: float = float(np.finfo(np.float64).eps)

# Hobby curl ("omega") at the ends of an open path
DEFAULT_CURL: float = 0.0

# Catmull-Rom tangent scale, 1.0 is the uniform Catmull-Rom spline
DEFAULT_TENSION: float = 1.0

# Tolerances used by approx_equal
DEFAULT_RTOL: float = 1e-9
DEFAULT_ATOL: float = 1e-9

# SVG export
SVG_STROKE: str = "black"
SVG_STROKE_WIDTH: float = 1.0
SVG_MARGIN: float = 10.0
SVG_VERTEX_RADIUS: float = 2.0
SVG_CONTROL_STROKE: str = "#8800ff"
