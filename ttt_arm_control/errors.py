#!/usr/bin/env python3
"""
Exceptions raised while driving a limb.

Everything derives from ArmControlError so the behavior layer can catch a
single type, abort the remaining steps and report failure.
"""


class ArmControlError(Exception):
    """Base exception for arm control failures"""
    pass


class UnreachablePoseError(ArmControlError):
    """Raised when the IK solver finds no joint solution for a pose"""

    def __init__(self, pose, limb: str):
        super().__init__(f"no IK solution for {limb} limb at {pose}")
        self.pose = pose
        self.limb = limb


class ReachTimeoutError(ArmControlError):
    """Raised when a goal is not satisfied within the poll cycle budget"""

    def __init__(self, pose, kind, cycles: int):
        super().__init__(
            f"{kind.name} goal {pose} not satisfied after {cycles} poll cycles")
        self.pose = pose
        self.kind = kind
        self.cycles = cycles


class InvalidCellIndexError(ArmControlError):
    """Raised when a board cell index is outside the board"""

    def __init__(self, cell_index, num_cells: int):
        super().__init__(
            f"cell index {cell_index!r} outside board range [0, {num_cells - 1}]")
        self.cell_index = cell_index
        self.num_cells = num_cells


class IKServiceError(ArmControlError):
    """Raised when the IK service cannot be reached or does not answer"""
    pass


class LimbBusyError(ArmControlError):
    """Raised when a second reach is started while one is in flight"""
    pass


class BehaviorNotAvailableError(ArmControlError):
    """Raised when a behavior is requested from a limb whose role lacks it"""
    pass
