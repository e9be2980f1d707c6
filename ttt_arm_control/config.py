#!/usr/bin/env python3
"""
Per-limb configuration.

Defaults come from params.py. A YAML file may override them with a
`common` section shared by both limbs and a section per limb name:

    common:
      max_cycles: 2000
      board: {center_x: 0.66, center_y: 0.21, cell_side: 0.12}
      token_stack: {position: [0.57, 0.57, -0.14], rpy_deg: [180, 0, 0]}
    left:
      standby: {position: [0.58, 0.6, 0.1], orientation: [0, 1, 0, 0]}
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

import yaml

from . import params
from .pose import Pose

PACKAGE_NAME = "ttt_arm_control"
DEFAULT_CONFIG_FILENAME = "arm_controller.yaml"


@dataclass(frozen=True)
class BoardGeometry:
    center_x: float = params.BOARD['center_x']
    center_y: float = params.BOARD['center_y']
    cell_side: float = params.BOARD['cell_side']
    rows: int = params.BOARD['rows']
    cols: int = params.BOARD['cols']
    place_z: float = params.BOARD['place_z']

    @property
    def num_cells(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class ArmConfig:
    """Everything a limb controller needs, loaded once and never changed."""
    # goal reaching
    poll_interval: float = params.POLL_INTERVAL
    max_cycles: int = params.MAX_CYCLES
    collision_threshold: float = params.COLLISION_THRESHOLD
    ik_timeout: float = params.IK_TIMEOUT
    pose_speed_ratio: float = params.POSE_SPEED_RATIO
    collision_speed_ratio: float = params.COLLISION_SPEED_RATIO

    # gripper
    gripper_id: int = params.DEFAULT_GRIPPER_ID
    grip_settle_time: float = params.GRIP_SETTLE_TIME

    # geometry
    hover_height: float = params.HOVER_HEIGHT
    board: BoardGeometry = field(default_factory=BoardGeometry)
    token_stack: Pose = field(default_factory=lambda: Pose.from_list(params.TOKEN_STACK_POSE))
    standby: Optional[Pose] = None
    out_of_view: Optional[Pose] = None

    @classmethod
    def for_limb(cls, limb: str, **overrides) -> "ArmConfig":
        """Defaults for `limb` with keyword overrides."""
        config = cls(
            standby=Pose.from_list(params.STANDBY_POSE[limb]),
            out_of_view=Pose.from_list(params.OUT_OF_VIEW_POSE[limb]),
        )
        return replace(config, **overrides) if overrides else config

    @classmethod
    def from_yaml(cls, file_path: str, limb: str) -> "ArmConfig":
        """
        Load `common` then `<limb>` from a YAML file over the limb defaults.

        A missing file gives the defaults; malformed content raises.
        """
        if limb not in params.LIMB_NAMES:
            raise ValueError(f"unknown limb {limb!r}; expected one of {params.LIMB_NAMES}")
        if not os.path.exists(file_path):
            return cls.for_limb(limb)

        with open(file_path, 'r') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{file_path}: top level must be a mapping")

        merged: Dict[str, Any] = {}
        for section in ('common', limb):
            values = data.get(section) or {}
            if not isinstance(values, dict):
                raise ValueError(f"{file_path}: section '{section}' must be a mapping")
            for key, value in values.items():
                if key == 'board':
                    # board merges key by key; later sections win per field
                    merged[key] = {**merged.get(key, {}), **_board_mapping(value, file_path)}
                else:
                    merged[key] = value
        return cls.for_limb(limb, **_parse_overrides(merged, file_path))


def default_config_path() -> str:
    """Config file installed in this package's share directory."""
    from ament_index_python.packages import get_package_share_directory
    return os.path.join(get_package_share_directory(PACKAGE_NAME), 'config', DEFAULT_CONFIG_FILENAME)


def parse_pose(data: Dict[str, Any]) -> Pose:
    """{position: [x,y,z], orientation: [x,y,z,w]} or {position, rpy_deg: [r,p,y]}"""
    if 'position' not in data:
        raise ValueError(f"pose entry needs a position: {data}")
    if 'rpy_deg' in data:
        return Pose.from_rpy(data['position'], data['rpy_deg'])
    if 'orientation' in data:
        return Pose(tuple(data['position']), tuple(data['orientation']))
    return Pose(tuple(data['position']))


_POSE_KEYS = ('token_stack', 'standby', 'out_of_view')


def _board_mapping(value: Any, source: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{source}: 'board' must be a mapping, got {value!r}")
    unknown = set(value) - {f.name for f in fields(BoardGeometry)}
    if unknown:
        raise ValueError(f"{source}: unknown board keys {sorted(unknown)}")
    return value


def _parse_overrides(merged: Dict[str, Any], source: str) -> Dict[str, Any]:
    known = {f.name for f in fields(ArmConfig)}
    unknown = set(merged) - known
    if unknown:
        raise ValueError(f"{source}: unknown config keys {sorted(unknown)}")

    overrides: Dict[str, Any] = {}
    for key, value in merged.items():
        if key in _POSE_KEYS:
            overrides[key] = parse_pose(value)
        elif key == 'board':
            overrides[key] = BoardGeometry(**value)
        else:
            overrides[key] = value
    return overrides
