# params.py
# ─── LIMBS ────────────────────────────────────────────────────────────────────
# The robot has two 7-DOF limbs. Right is the spectator (clears the camera's
# view of the board), left is the player (moves tokens).
LIMB_NAMES = ('left', 'right')
SPECTATOR_LIMB = 'right'
PLAYER_LIMB = 'left'

# joint suffixes, shoulder → wrist; full names are '<limb>_<suffix>'
JOINT_SUFFIXES = ('s0', 's1', 'e0', 'e1', 'w0', 'w1', 'w2')

# ─── ROS INTERFACES ───────────────────────────────────────────────────────────
# formatted with limb=<'left'|'right'>
ENDPOINT_TOPIC = '/robot/limb/{limb}/endpoint_state'
RANGE_TOPIC = '/robot/range/{limb}_hand_range/state'
IK_SERVICE = '/ExternalTools/{limb}/PositionKinematicsNode/IKService'
JOINT_COMMAND_TOPIC = '/robot/limb/{limb}/joint_command'
SPEED_RATIO_TOPIC = '/robot/limb/{limb}/set_speed_ratio'
GRIPPER_COMMAND_TOPIC = '/robot/end_effector/{limb}_gripper/command'
BASE_FRAME = 'base'

# baxter_core_msgs/JointCommand.POSITION_MODE
POSITION_MODE = 1
# baxter_core_msgs/EndEffectorCommand commands
GRIPPER_CMD_GRIP = 'grip'
GRIPPER_CMD_RELEASE = 'release'
DEFAULT_GRIPPER_ID = 65537

# ─── GOAL REACHING ────────────────────────────────────────────────────────────
POLL_INTERVAL = 0.01          # seconds between predicate evaluations (100 Hz)
MAX_CYCLES = 1500             # 15 s at POLL_INTERVAL
COLLISION_THRESHOLD = 0.065   # metres, hand IR range below this = contact
IK_TIMEOUT = 2.0              # seconds
POSE_SPEED_RATIO = 0.6        # joint speed ratio for free-space moves
COLLISION_SPEED_RATIO = 0.2   # joint speed ratio while descending onto a surface
GRIP_SETTLE_TIME = 0.5        # seconds to let suction build / release

# ─── BOARD & TOKEN GEOMETRY ───────────────────────────────────────────────────
# board center in the base frame, cells are CELL_SIDE apart; row 0 is the
# row nearest the robot
BOARD = {
    'center_x':  0.655,
    'center_y':  0.210,
    'cell_side': 0.120,
    'rows':      3,
    'cols':      3,
    'place_z':  -0.140,
}
HOVER_HEIGHT = 0.150          # metres above a stack/cell for approach & retreat

# ─── NAMED POSES ──────────────────────────────────────────────────────────────
# [x, y, z, qx, qy, qz, qw]; gripper pointing down
TOKEN_STACK_POSE = (0.570, 0.570, -0.140, 0.0, 1.0, 0.0, 0.0)
STANDBY_POSE = {
    'left':  (0.580, 0.600, 0.100, 0.0, 1.0, 0.0, 0.0),
    'right': (0.580, -0.600, 0.100, 0.0, 1.0, 0.0, 0.0),
}
OUT_OF_VIEW_POSE = {
    'left':  (0.300, 0.850, 0.300, 0.0, 1.0, 0.0, 0.0),
    'right': (0.300, -0.850, 0.300, 0.0, 1.0, 0.0, 0.0),
}
