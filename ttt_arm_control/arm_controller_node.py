#!/usr/bin/env python3
"""
ArmController node
------------------

ROS 2 wiring for one limb:

  • /robot/limb/<limb>/endpoint_state          → PoseTracker
  • /robot/range/<limb>_hand_range/state       → ProximityTracker
  • /ExternalTools/<limb>/.../IKService        ← GoalReacher (joint solutions)
  • /robot/limb/<limb>/set_speed_ratio         ← speed for the goal kind
  • /robot/limb/<limb>/joint_command           ← joint position command
  • /robot/end_effector/<limb>_gripper/command ← vacuum grip / release

Subscriptions are serviced by a MultiThreadedExecutor on a background
thread so behaviors can block the calling thread while feedback keeps
arriving.
"""

import threading
import time

import rclpy
from rclpy.callback_groups import ReentrantCallbackGroup
from rclpy.executors import MultiThreadedExecutor
from rclpy.node import Node
from rclpy.qos import qos_profile_sensor_data

from std_msgs.msg import Float64
from sensor_msgs.msg import Range
from geometry_msgs.msg import PoseStamped
from baxter_core_msgs.msg import EndEffectorCommand, EndpointState, JointCommand
from baxter_core_msgs.srv import SolvePositionIK

from . import params
from .behaviors import BehaviorSequencer
from .config import ArmConfig, default_config_path
from .errors import IKServiceError
from .goal_reacher import GoalKind, GoalReacher
from .limb import LimbIdentity
from .pose import Pose
from .trackers import PoseTracker, ProximityTracker


def pose_to_msg(pose: Pose, frame_id: str, stamp) -> PoseStamped:
    msg = PoseStamped()
    msg.header.frame_id = frame_id
    msg.header.stamp = stamp
    msg.pose.position.x, msg.pose.position.y, msg.pose.position.z = pose.position
    (msg.pose.orientation.x, msg.pose.orientation.y,
     msg.pose.orientation.z, msg.pose.orientation.w) = pose.orientation
    return msg


# =====================================================================================
# EXTERNAL COLLABORATORS
# =====================================================================================

class IKServiceSolver:
    """Joint solutions from the robot's position-kinematics service."""

    def __init__(self, node: Node, limb: LimbIdentity, timeout: float):
        self.node = node
        self.timeout = timeout
        self.client = node.create_client(SolvePositionIK, limb.topic(params.IK_SERVICE))

    def solve(self, pose: Pose, limb: LimbIdentity):
        if not self.client.wait_for_service(timeout_sec=self.timeout):
            raise IKServiceError(f"IK service {self.client.srv_name} unavailable")

        req = SolvePositionIK.Request()
        req.pose_stamp = [pose_to_msg(pose, params.BASE_FRAME, self.node.get_clock().now().to_msg())]
        future = self.client.call_async(req)

        # the executor thread completes the future
        start_time = time.monotonic()
        while not future.done() and (time.monotonic() - start_time) < self.timeout:
            time.sleep(0.005)

        if not future.done():
            self.client.remove_pending_request(future)
            raise IKServiceError(f"IK service gave no response within {self.timeout}s")
        if future.result() is None:
            raise IKServiceError(f"IK service {self.client.srv_name} returned no result")

        res = future.result()
        if not res.is_valid or not res.is_valid[0]:
            return None

        # solution joints come back by name; reorder shoulder → wrist
        solution = res.joints[0]
        angles = limb.ordered_joint_positions(list(solution.name), list(solution.position))
        if angles is None:
            raise IKServiceError(
                f"IK solution joints {list(solution.name)} do not match {list(limb.joint_names)}")
        return angles


class JointCommandPublisher:
    """Position-mode joint commands, preceded by the goal kind's speed ratio."""

    def __init__(self, node: Node, limb: LimbIdentity, config: ArmConfig):
        self.speed_ratio = {
            GoalKind.POSE: config.pose_speed_ratio,
            GoalKind.COLLISION: config.collision_speed_ratio,
        }
        self.speed_pub = node.create_publisher(Float64, limb.topic(params.SPEED_RATIO_TOPIC), 10)
        self.cmd_pub = node.create_publisher(JointCommand, limb.topic(params.JOINT_COMMAND_TOPIC), 10)

    def send(self, joint_angles, kind: GoalKind, limb: LimbIdentity) -> None:
        self.speed_pub.publish(Float64(data=float(self.speed_ratio[kind])))
        cmd = JointCommand()
        cmd.mode = params.POSITION_MODE
        cmd.names = list(limb.joint_names)
        cmd.command = [float(a) for a in joint_angles]
        self.cmd_pub.publish(cmd)


class VacuumGripper:
    """Suction gripper; commands are assumed to succeed."""

    def __init__(self, node: Node, limb: LimbIdentity, gripper_id: int):
        self.node = node
        self.gripper_id = gripper_id
        self.pub = node.create_publisher(
            EndEffectorCommand, limb.topic(params.GRIPPER_COMMAND_TOPIC), 10)

    def _send(self, command: str) -> None:
        msg = EndEffectorCommand()
        msg.id = self.gripper_id
        msg.command = command
        msg.sender = self.node.get_name()
        self.pub.publish(msg)
        self.node.get_logger().info(f"gripper: {command}")

    def activate(self) -> None:
        self._send(params.GRIPPER_CMD_GRIP)

    def deactivate(self) -> None:
        self._send(params.GRIPPER_CMD_RELEASE)


# =====================================================================================
# NODE
# =====================================================================================

class ArmControllerNode(Node):
    """
    Controller for one limb. Construct one per physical limb; the two limbs
    know nothing of each other.
    """

    def __init__(self, limb: LimbIdentity, config: ArmConfig):
        super().__init__(f"{limb.name}_arm_controller")
        self.limb = limb
        self.config = config
        log = self.get_logger()

        # ── 1) feedback caches ─────────────────────────────────────────────
        self.pose_tracker = PoseTracker()
        self.proximity_tracker = ProximityTracker(config.collision_threshold)

        group = ReentrantCallbackGroup()
        self.create_subscription(
            EndpointState, limb.topic(params.ENDPOINT_TOPIC),
            self.endpoint_callback, qos_profile_sensor_data, callback_group=group)
        self.create_subscription(
            Range, limb.topic(params.RANGE_TOPIC),
            self.range_callback, qos_profile_sensor_data, callback_group=group)

        # ── 2) collaborators ───────────────────────────────────────────────
        self.ik_solver = IKServiceSolver(self, limb, config.ik_timeout)
        self.command_sink = JointCommandPublisher(self, limb, config)
        self.gripper = VacuumGripper(self, limb, config.gripper_id)

        # ── 3) reacher + behaviors ─────────────────────────────────────────
        self.reacher = GoalReacher(
            limb, self.pose_tracker, self.proximity_tracker,
            self.ik_solver, self.command_sink,
            poll_interval=config.poll_interval,
            max_cycles=config.max_cycles,
            logger=log,
        )
        self.sequencer = BehaviorSequencer(limb, config, self.reacher, self.gripper, logger=log)

        log.info(f"arm controller ready for {limb} limb")

    # ── callbacks: overwrite only, never block ─────────────────────────────
    def endpoint_callback(self, msg: EndpointState):
        self.pose_tracker.on_pose_feedback(Pose.from_msg(msg.pose))

    def range_callback(self, msg: Range):
        self.proximity_tracker.on_range_sample(msg.range, msg.min_range, msg.max_range)

    # ── entry points ───────────────────────────────────────────────────────
    def move_out_of_view(self) -> bool:
        return self.sequencer.move_out_of_view()

    def move_to_standby(self) -> bool:
        return self.sequencer.move_to_standby()

    def pick_up_token(self) -> bool:
        return self.sequencer.pick_up_token()

    def place_token(self, cell_index: int) -> bool:
        return self.sequencer.place_token(cell_index)

    @property
    def behaviors(self):
        return self.sequencer.behaviors


class ControllerRuntime:
    """Owns rclpy, the node and the executor thread that services it."""

    def __init__(self, limb_name: str, config_path: str = None, num_threads: int = 2):
        if not rclpy.ok():
            rclpy.init()
        config_path = config_path or default_config_path()
        limb = LimbIdentity.for_limb(limb_name)
        self.node = ArmControllerNode(limb, ArmConfig.from_yaml(config_path, limb_name))
        self.executor = MultiThreadedExecutor(num_threads=num_threads)
        self.executor.add_node(self.node)
        self.executor_thread = threading.Thread(target=self.executor.spin, daemon=True)
        self.executor_thread.start()

    def shutdown(self):
        self.executor.shutdown()
        if self.executor_thread.is_alive():
            self.executor_thread.join(timeout=3.0)
        self.node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()
