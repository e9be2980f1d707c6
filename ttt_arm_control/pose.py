#!/usr/bin/env python3
"""
End-effector pose value and the coarse equality used to decide convergence.

Poses are compared component-wise after rounding to two decimal places.
Endpoint feedback is noisier than that, so any tighter comparison would
never report arrival.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.spatial.transform import Rotation as Rot

DECIMALS = 2

# gripper pointing straight down in the base frame
DOWNWARD_QUAT = (0.0, 1.0, 0.0, 0.0)


@dataclass(frozen=True)
class Pose:
    """Position (x, y, z) in metres and orientation quaternion (x, y, z, w)."""
    position: Tuple[float, float, float]
    orientation: Tuple[float, float, float, float] = DOWNWARD_QUAT

    def __post_init__(self):
        # normalise to plain float tuples so equality and hashing behave
        object.__setattr__(self, "position", tuple(float(v) for v in self.position))
        object.__setattr__(self, "orientation", tuple(float(v) for v in self.orientation))
        if len(self.position) != 3 or len(self.orientation) != 4:
            raise ValueError(
                f"pose needs 3 position and 4 orientation components, "
                f"got {len(self.position)} and {len(self.orientation)}")

    @classmethod
    def from_list(cls, values: Sequence[float]) -> "Pose":
        """Build from [x, y, z, qx, qy, qz, qw]."""
        if len(values) != 7:
            raise ValueError(f"expected 7 values, got {len(values)}")
        return cls(tuple(values[:3]), tuple(values[3:]))

    @classmethod
    def from_rpy(cls, position: Sequence[float], rpy_deg: Sequence[float]) -> "Pose":
        """Build from a position and extrinsic roll/pitch/yaw in degrees."""
        quat = Rot.from_euler("xyz", rpy_deg, degrees=True).as_quat()
        return cls(tuple(position), tuple(quat))

    @classmethod
    def from_msg(cls, msg) -> "Pose":
        """Build from anything shaped like geometry_msgs/Pose."""
        p, q = msg.position, msg.orientation
        return cls((p.x, p.y, p.z), (q.x, q.y, q.z, q.w))

    def as_list(self) -> list[float]:
        return list(self.position) + list(self.orientation)

    def as_array(self) -> np.ndarray:
        return np.asarray(self.as_list(), dtype=float)

    def translated(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "Pose":
        """Same orientation, position shifted by (dx, dy, dz)."""
        offset = np.array([dx, dy, dz], dtype=float)
        return Pose(tuple(np.asarray(self.position) + offset), self.orientation)

    def __str__(self):
        x, y, z = self.position
        qx, qy, qz, qw = self.orientation
        return (f"(x={x:.3f}, y={y:.3f}, z={z:.3f} | "
                f"q=({qx:.3f}, {qy:.3f}, {qz:.3f}, {qw:.3f}))")


def equal_two_dp(x: float, y: float) -> bool:
    """True if x and y are equal once rounded to two decimal places."""
    return round(float(x), DECIMALS) == round(float(y), DECIMALS)


def poses_match(requested: Optional[Pose], measured: Optional[Pose]) -> bool:
    """
    Compare every position and orientation component at two decimal places.

    An unknown pose (None) never matches anything.
    """
    if requested is None or measured is None:
        return False
    return all(equal_two_dp(a, b)
               for a, b in zip(requested.as_list(), measured.as_list()))
