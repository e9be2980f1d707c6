import pytest

from fakes import CountingPoseTracker, FakeIK, FakeSink, ScriptedSleep
from ttt_arm_control.config import ArmConfig
from ttt_arm_control.goal_reacher import GoalReacher
from ttt_arm_control.limb import LimbIdentity
from ttt_arm_control.pose import Pose
from ttt_arm_control.trackers import ProximityTracker

THRESHOLD = 0.065


@pytest.fixture
def left_limb():
    return LimbIdentity.for_limb("left")


@pytest.fixture
def right_limb():
    return LimbIdentity.for_limb("right")


@pytest.fixture
def target():
    return Pose((0.6, 0.2, -0.1), (0.0, 1.0, 0.0, 0.0))


@pytest.fixture
def pose_tracker():
    return CountingPoseTracker()


@pytest.fixture
def proximity_tracker():
    return ProximityTracker(THRESHOLD)


@pytest.fixture
def make_reacher(left_limb, pose_tracker, proximity_tracker):
    def _make(ik=None, sink=None, sleep=None, max_cycles=50):
        return GoalReacher(
            left_limb, pose_tracker, proximity_tracker,
            ik or FakeIK(), sink or FakeSink(),
            poll_interval=0.01, max_cycles=max_cycles,
            sleep=sleep or ScriptedSleep(),
        )
    return _make


@pytest.fixture
def left_config():
    return ArmConfig.for_limb("left")


@pytest.fixture
def right_config():
    return ArmConfig.for_limb("right")
