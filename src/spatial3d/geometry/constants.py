"""
Numeric tolerances shared by the geometry kernel.

Every operation that compares against one of these exposes it as a keyword
argument; the constants are only the defaults.
"""

import numpy as np

# Single-precision machine epsilon. Below this a vector norm is treated as zero
# and a pair of plane normals as rank deficient.
FLOAT_EPSILON: float = float(np.finfo(np.float32).eps)

# Double-precision machine epsilon (2 * 2**-53). Default for Line3D parallelism.
DOUBLE_EPSILON: float = float(np.finfo(np.float64).eps)

# |1 - |u.v|| below this means two unit vectors are parallel.
PARALLEL_TOLERANCE: float = 1e-10

# |u.v| below this means two unit vectors are perpendicular.
PERPENDICULAR_TOLERANCE: float = 1e-10

# Vector3D.is_perpendicular_to works on unnormalized input and is looser.
VECTOR_PERPENDICULAR_TOLERANCE: float = 1e-6

# Plane.signed_distance_to(plane | ray) parallelism precondition.
PLANE_PARALLEL_TOLERANCE: float = 1e-15

# Projected dot products this close to +-1 are snapped to 0 / pi.
ANGLE_SNAP_TOLERANCE: float = 1e-15

# UnitVector3D text parsing accepts |norm - 1| below this.
UNIT_VECTOR_PARSE_TOLERANCE: float = 0.1

# Max deviation of a 4x4 frame matrix's bottom row from [0, 0, 0, 1].
HOMOGENEOUS_ROW_TOLERANCE: float = 1e-9
