#!/usr/bin/env python3
"""
Goal Reacher
------------

Drives one limb to one target pose:

  REQUESTING_IK → COMMANDING → POLLING → SATISFIED | TIMED_OUT | IK_FAILED

The joint solution is sent once, then the termination predicate for the
goal kind is evaluated on a fixed cadence until it holds or the cycle
budget runs out. POSE goals finish when the measured pose matches the
requested pose at two decimal places. COLLISION goals also finish as soon
as the hand range sensor reports contact, which stops a descent before the
gripper drives through the surface.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence

from .errors import LimbBusyError, ReachTimeoutError, UnreachablePoseError
from .limb import LimbIdentity
from .pose import Pose, poses_match
from .trackers import PoseTracker, ProximityTracker


class GoalKind(Enum):
    POSE = "pose"
    COLLISION = "collision"


class ReachState(Enum):
    IDLE = "idle"
    REQUESTING_IK = "requesting_ik"
    COMMANDING = "commanding"
    POLLING = "polling"
    SATISFIED = "satisfied"
    TIMED_OUT = "timed_out"
    IK_FAILED = "ik_failed"


class IKSolver(Protocol):
    def solve(self, pose: Pose, limb: LimbIdentity) -> Optional[Sequence[float]]:
        """Joint angles shoulder → wrist, or None when there is no solution."""


class JointCommandSink(Protocol):
    def send(self, joint_angles: Sequence[float], kind: GoalKind, limb: LimbIdentity) -> None:
        """Fire-and-forget joint position command."""


@dataclass(frozen=True)
class ReachResult:
    state: ReachState
    kind: GoalKind
    cycles: int
    trigger: str          # "pose" or "collision"


# =====================================================================================
# TERMINATION PREDICATES
# =====================================================================================

def pose_reached(requested: Pose, poses: PoseTracker, proximity: ProximityTracker) -> Optional[str]:
    if poses_match(requested, poses.current_pose()):
        return "pose"
    return None


def pose_or_contact(requested: Pose, poses: PoseTracker, proximity: ProximityTracker) -> Optional[str]:
    if proximity.is_within_collision_threshold():
        return "collision"
    return pose_reached(requested, poses, proximity)


TERMINATION = {
    GoalKind.POSE: pose_reached,
    GoalKind.COLLISION: pose_or_contact,
}


# =====================================================================================
# REACHER
# =====================================================================================

class GoalReacher:
    """One reach at a time for one limb."""

    def __init__(
            self,
            limb: LimbIdentity,
            pose_tracker: PoseTracker,
            proximity_tracker: ProximityTracker,
            ik_solver: IKSolver,
            command_sink: JointCommandSink,
            poll_interval: float = 0.01,
            max_cycles: int = 1500,
            logger=None,
            sleep: Callable[[float], None] = time.sleep,
    ):
        if max_cycles < 1:
            raise ValueError(f"max_cycles must be >= 1, got {max_cycles}")
        self.limb = limb
        self.pose_tracker = pose_tracker
        self.proximity_tracker = proximity_tracker
        self.ik_solver = ik_solver
        self.command_sink = command_sink
        self.poll_interval = poll_interval
        self.max_cycles = max_cycles
        self.log = logger or logging.getLogger(__name__)
        self._sleep = sleep
        self._lock = threading.Lock()
        self.state = ReachState.IDLE

    def reach(self, target: Pose, kind: GoalKind = GoalKind.POSE) -> ReachResult:
        """
        Move to `target` and block until the goal kind's predicate holds.

        Raises
        ------
        UnreachablePoseError
            IK found no solution; nothing was commanded.
        ReachTimeoutError
            Predicate still false after `max_cycles` evaluations.
        LimbBusyError
            Another reach is already running on this limb.
        """
        if not self._lock.acquire(blocking=False):
            raise LimbBusyError(f"{self.limb.name} limb is already reaching a goal")
        try:
            return self._reach(target, kind)
        finally:
            self._lock.release()

    def _reach(self, target: Pose, kind: GoalKind) -> ReachResult:
        # ── 1) joint solution ───────────────────────────────────────────────
        self.state = ReachState.REQUESTING_IK
        self.log.debug(f"reach(): requesting IK for {kind.name} goal {target}")
        try:
            joint_angles = self.ik_solver.solve(target, self.limb)
        except Exception:
            self.state = ReachState.IK_FAILED
            raise
        if joint_angles is None or len(joint_angles) != self.limb.num_joints:
            self.state = ReachState.IK_FAILED
            raise UnreachablePoseError(target, self.limb.name)
        self.log.debug(
            "reach(): IK solution " + ", ".join(f"{a:.3f}" for a in joint_angles))

        # ── 2) command once ─────────────────────────────────────────────────
        self.state = ReachState.COMMANDING
        self.command_sink.send(list(joint_angles), kind, self.limb)

        # ── 3) poll ─────────────────────────────────────────────────────────
        self.state = ReachState.POLLING
        predicate = TERMINATION[kind]
        if kind is GoalKind.COLLISION and not self.proximity_tracker.has_sample:
            self.log.warning(
                "reach(): no range sample yet; descent will stop on pose match only")

        for cycle in range(1, self.max_cycles + 1):
            trigger = predicate(target, self.pose_tracker, self.proximity_tracker)
            if trigger is not None:
                self.state = ReachState.SATISFIED
                self.log.debug(f"reach(): {kind.name} goal satisfied by {trigger} "
                               f"after {cycle} cycle(s)")
                return ReachResult(ReachState.SATISFIED, kind, cycle, trigger)
            if cycle < self.max_cycles:
                self._sleep(self.poll_interval)

        self.state = ReachState.TIMED_OUT
        raise ReachTimeoutError(target, kind, self.max_cycles)
