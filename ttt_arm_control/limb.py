#!/usr/bin/env python3
"""Which physical limb a controller drives, and what that limb is for."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from . import params


class LimbRole(Enum):
    PLAYER = "player"
    SPECTATOR = "spectator"


@dataclass(frozen=True)
class LimbIdentity:
    name: str
    role: LimbRole

    @classmethod
    def for_limb(cls, name: str, role: Optional[LimbRole] = None) -> "LimbIdentity":
        """Right limb spectates and left limb plays unless a role is given."""
        if name not in params.LIMB_NAMES:
            raise ValueError(f"unknown limb {name!r}; expected one of {params.LIMB_NAMES}")
        if role is None:
            role = LimbRole.SPECTATOR if name == params.SPECTATOR_LIMB else LimbRole.PLAYER
        return cls(name, role)

    @property
    def joint_names(self) -> Tuple[str, ...]:
        return tuple(f"{self.name}_{suffix}" for suffix in params.JOINT_SUFFIXES)

    @property
    def num_joints(self) -> int:
        return len(params.JOINT_SUFFIXES)

    def ordered_joint_positions(self, names, positions) -> Optional[List[float]]:
        """
        Positions reordered shoulder to wrist by joint name, or None when the
        names are not exactly this limb's joints.
        """
        if sorted(names) != sorted(self.joint_names) or len(names) != len(positions):
            return None
        by_name = dict(zip(names, positions))
        return [float(by_name[name]) for name in self.joint_names]

    def topic(self, template: str) -> str:
        return template.format(limb=self.name)

    def __str__(self):
        return f"{self.name} ({self.role.value})"
