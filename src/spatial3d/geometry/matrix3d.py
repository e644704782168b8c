"""
3x3 rotation matrix builders.

Stateless functions returning ``numpy`` arrays; CoordinateSystem3D embeds
them into its 4x4 homogeneous matrix.
"""

from __future__ import annotations
import logging
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray

from .primitives import UnitVector3D, Vector3D

logger = logging.getLogger(__name__)


def rotation_around_arbitrary_vector(
    about: Union[Vector3D, UnitVector3D],
    angle: float,
) -> NDArray[np.float64]:
    """
    Rodrigues' rotation formula: R = I + sin(a) K + (1 - cos(a)) K^2.

    Args:
        about: Rotation axis (normalized here)
        angle: Rotation angle in radians, right-handed around ``about``

    Returns:
        3x3 rotation matrix
    """
    axis = about.normalize()
    K = axis.cross_product_matrix()
    return np.eye(3) + np.sin(angle) * K + (1.0 - np.cos(angle)) * (K @ K)


def rotation_xyz(rx: float, ry: float, rz: float) -> NDArray[np.float64]:
    """
    Rotation about x, then y, then z (fixed axes, radians).

    Returns:
        3x3 rotation matrix R = Rz @ Ry @ Rx
    """
    Rx = rotation_around_arbitrary_vector(UnitVector3D.x_axis(), rx)
    Ry = rotation_around_arbitrary_vector(UnitVector3D.y_axis(), ry)
    Rz = rotation_around_arbitrary_vector(UnitVector3D.z_axis(), rz)
    return Rz @ Ry @ Rx


def rotation_to(
    from_vector: UnitVector3D,
    to_vector: UnitVector3D,
    axis: Optional[UnitVector3D] = None,
) -> NDArray[np.float64]:
    """
    Rotation that maps ``from_vector`` onto ``to_vector``.

    Args:
        from_vector: Start direction
        to_vector: Target direction
        axis: Rotation axis used only when the two directions are parallel
            (otherwise the cross product is used). Defaults to an arbitrary
            vector orthogonal to ``from_vector``.

    Returns:
        3x3 rotation matrix
    """
    from_vector = from_vector.normalize()
    to_vector = to_vector.normalize()
    if from_vector == to_vector:
        return np.eye(3)

    if from_vector.is_parallel_to(to_vector):
        if axis is None:
            axis = from_vector.orthogonal
        logger.debug("rotation_to: antiparallel input, rotating about %s", axis)
    else:
        axis = from_vector.cross(to_vector)

    angle = from_vector.signed_angle_to(to_vector, axis)
    return rotation_around_arbitrary_vector(axis, angle)
