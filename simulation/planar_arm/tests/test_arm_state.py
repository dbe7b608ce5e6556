"""Tests for arm state and move commands."""

import logging
import threading

import pytest
import numpy as np
from planar_arm.arm_state import (
    ArmState, MoveStatus, check_target, format_status, parse_target,
)
from planar_arm.config import DEFAULT_LINKS, HOME_ANGLES, HOME_POSITION
from planar_arm.errors import (
    InvalidInputError, OutOfWorkspaceError, UnreachableError,
)
from planar_arm.kinematics import (
    CartesianPoint, LinkLengths, solve_forward,
)


@pytest.fixture
def arm():
    """Arm with the default 12 cm links, resting at its initial pose."""
    return ArmState()


class TestInitialState:
    """Test the pose before any move."""

    def test_initial_pose(self, arm):
        assert arm.angles == HOME_ANGLES
        assert arm.position == HOME_POSITION
        assert arm.links == DEFAULT_LINKS

    def test_initial_trail_is_stationary(self, arm):
        """A fresh arm holds a trajectory that stays at the initial pose."""
        expected = solve_forward(HOME_ANGLES, DEFAULT_LINKS)
        assert len(arm.trail) == 101
        assert all(p.x == pytest.approx(expected.x) for p in arm.trail)
        assert all(p.y == pytest.approx(expected.y) for p in arm.trail)

    def test_snapshot(self, arm):
        snap = arm.snapshot()
        assert snap.angles == arm.angles
        assert snap.position == arm.position
        assert snap.trail == arm.trail
        assert len(snap.joints) == 4
        assert snap.joints[1].y == pytest.approx(0.12)


class TestMoveTo:
    """Test accepted and rejected moves."""

    def test_move_reachable(self, arm):
        result = arm.move_to(CartesianPoint(0.14, 0.14))

        assert result.ok
        assert result.status is MoveStatus.OK
        assert result.message == ""
        assert arm.position == (0.14, 0.14)
        x, y = solve_forward(arm.angles, arm.links)
        assert abs(x - 0.14) < 1e-9
        assert abs(y - 0.14) < 1e-9

    def test_trajectory_runs_from_previous_pose(self, arm):
        result = arm.move_to(CartesianPoint(0.14, 0.14))
        traj = result.trajectory

        assert len(traj) == 101
        assert traj.final_angles == arm.angles
        assert (traj[0].q1, traj[0].q2) == HOME_ANGLES
        assert arm.last_trajectory is traj
        assert arm.trail == traj.cartesian_points

    def test_consecutive_moves_chain(self, arm):
        first = arm.move_to(CartesianPoint(0.14, 0.14))
        second = arm.move_to(CartesianPoint(0.0, 0.2))
        assert second.ok
        assert (second.trajectory[0].q1, second.trajectory[0].q2) == \
            first.trajectory.final_angles

    def test_accepts_plain_tuple(self, arm):
        assert arm.move_to((0.1, 0.1)).ok

    def test_out_of_workspace(self, arm, caplog):
        """(1, 1) is far outside a 0.24 m reach; nothing changes."""
        before = arm.snapshot()
        last = arm.last_trajectory

        with caplog.at_level(logging.WARNING, logger='planar_arm.arm_state'):
            result = arm.move_to(CartesianPoint(1.0, 1.0))

        assert not result.ok
        assert result.status is MoveStatus.OUT_OF_WORKSPACE
        assert result.point == (1.0, 1.0)
        assert result.trajectory is None
        assert "outside workspace" in result.message
        assert isinstance(result.error, OutOfWorkspaceError)
        assert arm.snapshot() == before
        assert arm.last_trajectory is last
        assert "out_of_workspace" in caplog.text

    def test_raise_for_status(self, arm):
        with pytest.raises(OutOfWorkspaceError):
            arm.move_to(CartesianPoint(1.0, 1.0)).raise_for_status()
        arm.move_to(CartesianPoint(0.14, 0.14)).raise_for_status()

    @pytest.mark.parametrize("point", [
        (float('nan'), 0.1),
        (0.1, float('inf')),
        ("abc", 0.1),
        (True, False),
        None,
        0.14,
        (0.1,),
        (0.1, 0.1, 0.1),
    ])
    def test_invalid_input(self, arm, point):
        before = arm.snapshot()
        result = arm.move_to(point)
        assert result.status is MoveStatus.INVALID_INPUT
        assert isinstance(result.error, InvalidInputError)
        assert arm.snapshot() == before

    def test_ik_failure_leaves_state(self, arm, monkeypatch):
        """Solver rejection is reported even when the annulus test passed."""
        def refuse(point, links):
            raise UnreachableError(point[0], point[1], 1.0000000001)

        monkeypatch.setattr('planar_arm.kinematics.solve_inverse', refuse)
        before = arm.snapshot()

        result = arm.move_to(CartesianPoint(0.14, 0.14))

        assert result.status is MoveStatus.IK_FAILURE
        assert "unreachable" in result.message
        assert arm.snapshot() == before

    def test_ik_failure_at_outer_boundary(self, arm):
        """Fully stretched target passes the annulus test but rounds past
        cos(q2) = 1 in the solver."""
        point = CartesianPoint(0.24, 0.0)
        assert check_target(point) is None
        before = arm.snapshot()

        result = arm.move_to(point)

        assert result.status is MoveStatus.IK_FAILURE
        assert isinstance(result.error, UnreachableError)
        assert arm.snapshot() == before

    def test_custom_links_and_horizon(self):
        arm = ArmState(links=LinkLengths(l1=0.1, l2=0.08),
                       home_position=CartesianPoint(0.1, 0.05),
                       sample_count=11, duration=5.0)
        result = arm.move_to(CartesianPoint(0.05, 0.1))
        assert len(result.trajectory) == 11
        assert result.trajectory[-1].t == 5.0
        assert arm.move_to(CartesianPoint(0.01, 0.0)).status is \
            MoveStatus.OUT_OF_WORKSPACE

    def test_concurrent_moves_keep_pose_consistent(self, arm):
        targets = [CartesianPoint(0.14, 0.14), CartesianPoint(0.0, 0.2),
                   CartesianPoint(-0.1, 0.15), CartesianPoint(0.2, 0.0)]
        threads = [threading.Thread(target=arm.move_to, args=(t,))
                   for t in targets * 5]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snap = arm.snapshot()
        assert snap.position in targets
        x, y = solve_forward(snap.angles, arm.links)
        assert x == pytest.approx(snap.position.x, abs=1e-9)
        assert y == pytest.approx(snap.position.y, abs=1e-9)
        assert snap.trail[-1].x == pytest.approx(snap.position.x, abs=1e-9)


class TestHome:
    """Test the go-home command."""

    def test_home_moves_to_home_position(self, arm):
        arm.move_to(CartesianPoint(0.0, 0.2))
        result = arm.home()
        assert result.ok
        assert arm.position == HOME_POSITION

    def test_home_idempotent(self, arm):
        arm.home()
        first = arm.snapshot()
        arm.home()
        second = arm.snapshot()
        arm.home()
        third = arm.snapshot()

        assert second.angles == first.angles
        assert second.position == first.position
        assert third == second

    def test_second_home_trajectory_is_stationary(self, arm):
        arm.home()
        traj = arm.home().trajectory
        assert np.allclose(traj.q1, traj.q1[0], rtol=0, atol=1e-15)
        assert np.allclose(traj.q2, traj.q2[0], rtol=0, atol=1e-15)


class TestInputHelpers:
    """Test UI-facing helpers."""

    def test_parse_target(self):
        assert parse_target("0.14", " 0.1 ") == CartesianPoint(0.14, 0.1)
        assert parse_target(0.1, 2) == CartesianPoint(0.1, 2.0)

    @pytest.mark.parametrize("x, y", [("", "0.1"), ("0.1", "y"),
                                      (None, "0.1"), ("nan", "0.1"),
                                      (True, "0.1"), ("0.1", False)])
    def test_parse_target_invalid(self, x, y):
        with pytest.raises(InvalidInputError, match="Invalid"):
            parse_target(x, y)

    def test_check_target(self):
        assert check_target(CartesianPoint(0.14, 0.14)) is None
        assert "outside" in check_target(CartesianPoint(1.0, 1.0))

    def test_format_status(self, arm):
        text = format_status(arm.snapshot())
        assert text == "x: 0.140, y: 0.140 | theta1: 90.0 deg, theta2: 0.0 deg"
