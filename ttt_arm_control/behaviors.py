#!/usr/bin/env python3
"""
Behavior Sequencer
------------------

The four things a limb does during a game, each a fixed script of goal
reaches and gripper commands:

  move_out_of_view   spectator limb clears the camera's view of the board
  move_to_standby    limb parks between turns
  pick_up_token      hover over stack → descend until contact → grip → hover
  place_token(cell)  hover over cell → descend until contact → release → hover

Every entry point blocks and returns True on success. The first failing
step aborts the rest of the script; the failure is logged and False is
returned. Re-running a behavior starts it again from the first step.
"""

from __future__ import annotations

import functools
import logging
import threading
import time
from typing import Callable, Dict, Protocol

from .config import ArmConfig
from .errors import ArmControlError, BehaviorNotAvailableError
from .goal_reacher import GoalKind, GoalReacher, ReachResult
from .grid import cell_pose
from .limb import LimbIdentity, LimbRole
from .pose import Pose


class Gripper(Protocol):
    def activate(self) -> None: ...

    def deactivate(self) -> None: ...


def behavior(*roles: LimbRole):
    """
    Turn a step script into a behavior entry point.

    Checks the limb role, serialises behaviors on the limb, logs duration
    and converts ArmControlError into a False return.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            name = func.__name__
            call = f"{name}({', '.join(repr(a) for a in args)})"
            with self._behavior_lock:
                start_time = time.monotonic()
                try:
                    if self.limb.role not in roles:
                        raise BehaviorNotAvailableError(
                            f"{name} is not available to the {self.limb} limb")
                    self.log.info(f"{call}: started on {self.limb.name} limb")
                    func(self, *args, **kwargs)
                except ArmControlError as e:
                    self.log.error(f"{call}: aborted: {e}")
                    return False
                duration = time.monotonic() - start_time
                self.log.info(f"{call}: completed in {duration:.2f}s")
                return True
        wrapper.roles = roles
        return wrapper
    return decorator


class BehaviorSequencer:

    def __init__(
            self,
            limb: LimbIdentity,
            config: ArmConfig,
            reacher: GoalReacher,
            gripper: Gripper,
            logger=None,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self.limb = limb
        self.config = config
        self.reacher = reacher
        self.gripper = gripper
        self.log = logger or logging.getLogger(__name__)
        self._sleep = sleep
        self._behavior_lock = threading.Lock()

    # =====================================================================================
    # ENTRY POINTS
    # =====================================================================================

    @behavior(LimbRole.SPECTATOR)
    def move_out_of_view(self):
        self._step("out of view", self.config.out_of_view, GoalKind.POSE)

    @behavior(LimbRole.PLAYER, LimbRole.SPECTATOR)
    def move_to_standby(self):
        self._step("standby", self.config.standby, GoalKind.POSE)

    @behavior(LimbRole.PLAYER)
    def pick_up_token(self):
        stack = self.config.token_stack
        hover = self._hover_above(stack)
        self._step("hover above tokens", hover, GoalKind.POSE)
        self._step("descend onto tokens", stack, GoalKind.COLLISION)
        self.gripper.activate()
        self._sleep(self.config.grip_settle_time)
        self._step("lift token", hover, GoalKind.POSE)

    @behavior(LimbRole.PLAYER)
    def place_token(self, cell_index: int):
        board = self.config.board
        target = cell_pose(
            cell_index, board.center_x, board.center_y, board.cell_side,
            z=board.place_z, orientation=self.config.token_stack.orientation,
            rows=board.rows, cols=board.cols,
        )
        hover = self._hover_above(target)
        self._step(f"hover above cell {cell_index}", hover, GoalKind.POSE)
        self._step(f"descend onto cell {cell_index}", target, GoalKind.COLLISION)
        self.gripper.deactivate()
        self._sleep(self.config.grip_settle_time)
        self._step(f"retreat from cell {cell_index}", hover, GoalKind.POSE)

    @property
    def behaviors(self) -> Dict[str, Callable[..., bool]]:
        """Entry points this limb's role allows, by name."""
        available = {}
        for name in ('move_out_of_view', 'move_to_standby', 'pick_up_token', 'place_token'):
            method = getattr(self, name)
            if self.limb.role in method.roles:
                available[name] = method
        return available

    # =====================================================================================
    # HELPERS
    # =====================================================================================

    def _hover_above(self, pose: Pose) -> Pose:
        return pose.translated(dz=self.config.hover_height)

    def _step(self, label: str, target: Pose, kind: GoalKind) -> ReachResult:
        self.log.info(f"  → {label}: {kind.name} goal {target}")
        result = self.reacher.reach(target, kind)
        self.log.info(f"  ✓ {label}: {result.trigger} after {result.cycles} cycle(s)")
        return result
