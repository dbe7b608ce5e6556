"""Current pose of the arm and the move command that updates it."""

import logging
import math
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from planar_arm import kinematics
from planar_arm import trajectory as trajectories
from planar_arm.config import (
    DEFAULT_DURATION, DEFAULT_LINKS, DEFAULT_SAMPLE_COUNT, HOME_ANGLES,
    HOME_POSITION,
)
from planar_arm.errors import (
    InvalidInputError, OutOfWorkspaceError, UnreachableError,
)
from planar_arm.kinematics import CartesianPoint, JointAngles, LinkLengths
from planar_arm.trajectory import Trajectory

logger = logging.getLogger(__name__)


class MoveStatus(Enum):
    """Outcome of a move command."""
    OK = "ok"
    OUT_OF_WORKSPACE = "out_of_workspace"
    IK_FAILURE = "ik_failure"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class MoveResult:
    """
    Result of ArmState.move_to.

    On success `trajectory` holds the full path for plotting. On failure
    `point` is the rejected target and `message` the user-facing warning.
    """

    status: MoveStatus
    point: CartesianPoint
    trajectory: Optional[Trajectory] = None
    message: str = ""
    error: Optional[ValueError] = None

    @property
    def ok(self) -> bool:
        return self.status is MoveStatus.OK

    def raise_for_status(self) -> None:
        """Re-raise the error behind a rejected move."""
        if self.error is not None:
            raise self.error


@dataclass(frozen=True)
class ArmSnapshot:
    """Read-only view of the arm for rendering."""

    angles: JointAngles
    position: CartesianPoint
    trail: Tuple[CartesianPoint, ...]
    joints: Tuple[CartesianPoint, ...]


def parse_target(x_text, y_text) -> CartesianPoint:
    """
    Convert raw UI input into a target point.

    Args:
        x_text: X coordinate (string or number, meters)
        y_text: Y coordinate (string or number, meters)

    Returns:
        Target point

    Raises:
        InvalidInputError: If a value is empty, boolean, non-numeric or
            not finite
    """
    values = []
    for name, raw in (('x', x_text), ('y', y_text)):
        if isinstance(raw, bool):
            raise InvalidInputError(
                f"Invalid {name} coordinate {raw!r}: enter a number")
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise InvalidInputError(
                f"Invalid {name} coordinate {raw!r}: enter a number") from None
        if not math.isfinite(value):
            raise InvalidInputError(
                f"Invalid {name} coordinate {raw!r}: must be finite")
        values.append(value)
    return CartesianPoint(*values)


def check_target(point: CartesianPoint,
                 links: LinkLengths = DEFAULT_LINKS) -> Optional[str]:
    """Early reachability feedback while a target is being typed.

    Returns the warning to show, or None when the point is reachable.
    """
    if kinematics.reachable(point, links):
        return None
    return "Warning: the point is outside the robot workspace."


class ArmState:
    """
    Owner of the arm's current pose.

    The pose changes only through move_to/home and only when a move
    succeeds. A single lock guards the read-compute-replace sequence.
    """

    def __init__(
        self,
        links: LinkLengths = DEFAULT_LINKS,
        home_position: CartesianPoint = HOME_POSITION,
        initial_angles: JointAngles = HOME_ANGLES,
        sample_count: int = DEFAULT_SAMPLE_COUNT,
        duration: float = DEFAULT_DURATION,
    ):
        """
        Initialize the arm at rest.

        Args:
            links: Arm geometry, fixed for the lifetime of the state
            home_position: Target of home() (meters)
            initial_angles: Pose before the first move (radians)
            sample_count: Samples per generated trajectory
            duration: Horizon of each move (seconds)
        """
        self.links = links
        self.home_position = CartesianPoint(*home_position)
        self.sample_count = sample_count
        self.duration = duration
        self._lock = threading.Lock()

        self._angles = JointAngles(*initial_angles)
        # Reported position starts at the home target until the first move
        self._position = self.home_position
        self._trajectory = trajectories.generate(
            self._angles, self._angles, links, sample_count, duration)
        self._trail = self._trajectory.cartesian_points

    @property
    def angles(self) -> JointAngles:
        return self._angles

    @property
    def position(self) -> CartesianPoint:
        return self._position

    @property
    def trail(self) -> Tuple[CartesianPoint, ...]:
        return self._trail

    @property
    def last_trajectory(self) -> Trajectory:
        return self._trajectory

    def snapshot(self) -> ArmSnapshot:
        with self._lock:
            return ArmSnapshot(
                angles=self._angles,
                position=self._position,
                trail=self._trail,
                joints=kinematics.joint_positions(self._angles, self.links),
            )

    def move_to(self, point: CartesianPoint) -> MoveResult:
        """
        Move the TCP to a target point along a quintic joint trajectory.

        Args:
            point: Target TCP position (meters)

        Returns:
            MoveResult; the state is unchanged unless status is OK
        """
        try:
            x, y = point
        except (TypeError, ValueError):
            return self._reject(MoveStatus.INVALID_INPUT, point,
                                InvalidInputError(
                                    f"Target must be an (x, y) pair, "
                                    f"got {point!r}"))
        try:
            point = parse_target(x, y)
        except InvalidInputError as e:
            return self._reject(MoveStatus.INVALID_INPUT, point, e)

        with self._lock:
            if not kinematics.reachable(point, self.links):
                return self._reject(
                    MoveStatus.OUT_OF_WORKSPACE, point,
                    OutOfWorkspaceError(point.x, point.y,
                                        self.links.min_reach,
                                        self.links.max_reach))
            try:
                target = kinematics.solve_inverse(point, self.links)
            except UnreachableError as e:
                return self._reject(MoveStatus.IK_FAILURE, point, e)

            path = trajectories.generate(self._angles, target, self.links,
                                         self.sample_count, self.duration)

            self._angles = target
            self._position = point
            self._trajectory = path
            self._trail = path.cartesian_points

        logger.info("Moved to (%.3f, %.3f): q1=%.4f q2=%.4f",
                    point.x, point.y, target.q1, target.q2)
        return MoveResult(MoveStatus.OK, point, trajectory=path)

    def home(self) -> MoveResult:
        """Move to the configured home position."""
        return self.move_to(self.home_position)

    def _reject(self, status: MoveStatus, point, error: ValueError) -> MoveResult:
        logger.warning("Move rejected (%s): %s", status.value, error)
        return MoveResult(status, point, message=str(error), error=error)


def format_status(snapshot: ArmSnapshot) -> str:
    """Status line with the TCP in meters and joint angles in degrees."""
    q1_deg, q2_deg = (math.degrees(q) for q in snapshot.angles)
    return (f"x: {snapshot.position.x:.3f}, y: {snapshot.position.y:.3f} | "
            f"theta1: {q1_deg:.1f} deg, theta2: {q2_deg:.1f} deg")
