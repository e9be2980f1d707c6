import pytest

from fakes import FakeIK, FakeSink, ScriptedSleep
from ttt_arm_control.errors import (
    IKServiceError, LimbBusyError, ReachTimeoutError, UnreachablePoseError,
)
from ttt_arm_control.goal_reacher import GoalKind, GoalReacher, ReachState
from ttt_arm_control.pose import Pose

IN_RANGE_CONTACT = (0.03, 0.004, 0.4)
OUT_OF_RANGE = (0.5, 0.004, 0.4)
FAR_AWAY = Pose((0.1, 0.1, 0.4), (0.0, 1.0, 0.0, 0.0))


def test_pose_goal_already_reached_finishes_on_first_cycle(make_reacher, pose_tracker, target):
    pose_tracker.on_pose_feedback(target)
    sink = FakeSink()
    sleep = ScriptedSleep()
    reacher = make_reacher(sink=sink, sleep=sleep)

    result = reacher.reach(target, GoalKind.POSE)

    assert result.state is ReachState.SATISFIED
    assert result.cycles == 1
    assert result.trigger == "pose"
    assert sleep.calls == []
    assert len(sink.sent) == 1


def test_pose_goal_converges_once_feedback_rounds_equal(make_reacher, pose_tracker, target):
    pose_tracker.on_pose_feedback(FAR_AWAY)
    noisy = Pose((0.601, 0.199, -0.101), (0.001, 0.999, 0.0, 0.002))
    sleep = ScriptedSleep({3: lambda: pose_tracker.on_pose_feedback(noisy)})
    reacher = make_reacher(sleep=sleep)

    result = reacher.reach(target, GoalKind.POSE)

    assert result.cycles == 4
    assert sleep.calls == [0.01, 0.01, 0.01]
    assert reacher.state is ReachState.SATISFIED


def test_joint_command_sent_exactly_once_with_goal_kind(make_reacher, proximity_tracker, target):
    sink = FakeSink()
    sleep = ScriptedSleep({5: lambda: proximity_tracker.on_range_sample(*IN_RANGE_CONTACT)})
    ik = FakeIK()
    reacher = make_reacher(ik=ik, sink=sink, sleep=sleep)

    reacher.reach(target, GoalKind.COLLISION)

    assert ik.requests == [target]
    assert sink.sent == [(ik.solution, GoalKind.COLLISION)]


def test_collision_goal_stops_on_contact_before_pose_converges(make_reacher, pose_tracker,
                                                               proximity_tracker, target):
    pose_tracker.on_pose_feedback(FAR_AWAY)
    proximity_tracker.on_range_sample(*OUT_OF_RANGE)
    sleep = ScriptedSleep({2: lambda: proximity_tracker.on_range_sample(*IN_RANGE_CONTACT)})
    reacher = make_reacher(sleep=sleep)

    result = reacher.reach(target, GoalKind.COLLISION)

    assert result.state is ReachState.SATISFIED
    assert result.trigger == "collision"
    assert result.cycles == 3


def test_collision_goal_also_stops_on_pose_match(make_reacher, pose_tracker,
                                                 proximity_tracker, target):
    proximity_tracker.on_range_sample(*OUT_OF_RANGE)
    pose_tracker.on_pose_feedback(target)

    result = make_reacher().reach(target, GoalKind.COLLISION)

    assert result.trigger == "pose"
    assert result.cycles == 1


def test_pose_goal_ignores_contact(make_reacher, pose_tracker, proximity_tracker, target):
    pose_tracker.on_pose_feedback(FAR_AWAY)
    proximity_tracker.on_range_sample(*IN_RANGE_CONTACT)

    with pytest.raises(ReachTimeoutError):
        make_reacher(max_cycles=5).reach(target, GoalKind.POSE)


def test_collision_goal_times_out_after_exact_cycle_budget(make_reacher, pose_tracker,
                                                           proximity_tracker, target):
    pose_tracker.on_pose_feedback(FAR_AWAY)
    proximity_tracker.on_range_sample(*OUT_OF_RANGE)
    sleep = ScriptedSleep()
    reacher = make_reacher(sleep=sleep, max_cycles=25)
    pose_tracker.reads = 0

    with pytest.raises(ReachTimeoutError) as excinfo:
        reacher.reach(target, GoalKind.COLLISION)

    assert excinfo.value.cycles == 25
    assert excinfo.value.kind is GoalKind.COLLISION
    assert pose_tracker.reads == 25
    assert len(sleep.calls) == 24
    assert reacher.state is ReachState.TIMED_OUT


def test_no_feedback_ever_times_out(make_reacher, target):
    with pytest.raises(ReachTimeoutError):
        make_reacher(max_cycles=3).reach(target, GoalKind.POSE)


def test_collision_goal_without_range_sample_falls_back_to_pose(make_reacher, pose_tracker, target):
    sleep = ScriptedSleep({1: lambda: pose_tracker.on_pose_feedback(target)})

    result = make_reacher(sleep=sleep).reach(target, GoalKind.COLLISION)

    assert result.trigger == "pose"
    assert result.cycles == 2


def test_unreachable_pose_sends_no_command(make_reacher, target):
    sink = FakeSink()
    reacher = make_reacher(ik=FakeIK(solution=None), sink=sink)

    with pytest.raises(UnreachablePoseError) as excinfo:
        reacher.reach(target, GoalKind.POSE)

    assert excinfo.value.limb == "left"
    assert sink.sent == []
    assert reacher.state is ReachState.IK_FAILED


def test_wrong_length_solution_is_unreachable(make_reacher, target):
    sink = FakeSink()
    reacher = make_reacher(ik=FakeIK(solution=[0.0] * 6), sink=sink)

    with pytest.raises(UnreachablePoseError):
        reacher.reach(target)
    assert sink.sent == []


def test_ik_transport_failure_propagates(make_reacher, target):
    class DownIK:
        def solve(self, pose, limb):
            raise IKServiceError("IK service unavailable")

    sink = FakeSink()
    reacher = make_reacher(ik=DownIK(), sink=sink)

    with pytest.raises(IKServiceError):
        reacher.reach(target)
    assert sink.sent == []
    assert reacher.state is ReachState.IK_FAILED


def test_second_reach_while_polling_is_rejected(make_reacher, pose_tracker, target):
    pose_tracker.on_pose_feedback(FAR_AWAY)
    rejected = []

    def reenter():
        with pytest.raises(LimbBusyError):
            reacher.reach(target)
        rejected.append(True)
        pose_tracker.on_pose_feedback(target)

    reacher = make_reacher(sleep=ScriptedSleep({1: reenter}))

    assert reacher.reach(target).cycles == 2
    assert rejected == [True]


def test_reacher_is_reusable_after_failure(make_reacher, pose_tracker, target):
    reacher = make_reacher(max_cycles=2)
    with pytest.raises(ReachTimeoutError):
        reacher.reach(target)

    pose_tracker.on_pose_feedback(target)
    assert reacher.reach(target).state is ReachState.SATISFIED


def test_cycle_budget_must_be_positive(left_limb, pose_tracker, proximity_tracker):
    with pytest.raises(ValueError):
        GoalReacher(left_limb, pose_tracker, proximity_tracker, FakeIK(), FakeSink(), max_cycles=0)
