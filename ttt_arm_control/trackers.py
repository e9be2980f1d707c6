#!/usr/bin/env python3
"""
Latest-value caches for endpoint pose and hand proximity feedback.

Both are written from subscription callbacks and read by the goal reacher
on another thread. Each holds one value and overwrites it whole, so a
reader never sees half of an update.
"""

from __future__ import annotations

import threading
from typing import NamedTuple, Optional

from .pose import Pose


class PoseTracker:
    """Most recent measured end-effector pose; None until feedback arrives."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pose: Optional[Pose] = None

    def on_pose_feedback(self, pose: Pose) -> None:
        with self._lock:
            self._pose = pose

    def current_pose(self) -> Optional[Pose]:
        with self._lock:
            return self._pose


class ProximityReading(NamedTuple):
    distance: float
    min_range: float
    max_range: float

    @property
    def in_range(self) -> bool:
        return self.min_range <= self.distance <= self.max_range


class ProximityTracker:
    """
    Most recent hand range sample and the collision test against it.

    Before the first sample the tracker reports no collision, so a limb can
    move before the sensor has published.
    """

    def __init__(self, collision_threshold: float):
        self.collision_threshold = float(collision_threshold)
        self._lock = threading.Lock()
        self._reading: Optional[ProximityReading] = None

    def on_range_sample(self, distance: float, min_range: float, max_range: float) -> None:
        reading = ProximityReading(float(distance), float(min_range), float(max_range))
        with self._lock:
            self._reading = reading

    def latest(self) -> Optional[ProximityReading]:
        with self._lock:
            return self._reading

    @property
    def has_sample(self) -> bool:
        return self.latest() is not None

    def is_within_collision_threshold(self) -> bool:
        reading = self.latest()
        if reading is None or not reading.in_range:
            return False
        return reading.distance < self.collision_threshold
