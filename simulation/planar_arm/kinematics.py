"""Forward and inverse kinematics for a 2-link planar arm."""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Tuple

import numpy as np

from planar_arm.errors import UnreachableError

logger = logging.getLogger(__name__)


class CartesianPoint(NamedTuple):
    """Position in the robot base frame (meters)."""
    x: float
    y: float


class JointAngles(NamedTuple):
    """Joint angles (radians).

    q1: Shoulder angle measured from the positive x-axis
    q2: Elbow angle relative to the direction of link 1
    """
    q1: float
    q2: float


@dataclass(frozen=True)
class LinkLengths:
    """
    Geometry of the 2-link arm.

    Link 1 (l1): Shoulder to elbow
    Link 2 (l2): Elbow to TCP
    Gripper: TCP to gripper tip, along link 2

    Args:
        l1: Shoulder to elbow length (meters)
        l2: Elbow to TCP length (meters)
        gripper_length: TCP to gripper tip length (meters)

    Raises:
        ValueError: If a link is not positive or the gripper is negative
    """

    l1: float = 0.12
    l2: float = 0.12
    gripper_length: float = 0.0

    def __post_init__(self):
        if not (self.l1 > 0 and self.l2 > 0):
            raise ValueError(f"Link lengths must be positive, got "
                             f"l1={self.l1}, l2={self.l2}")
        if not self.gripper_length >= 0:
            raise ValueError(f"Gripper length must be non-negative, "
                             f"got {self.gripper_length}")

    @property
    def max_reach(self) -> float:
        return self.l1 + self.l2

    @property
    def min_reach(self) -> float:
        return abs(self.l1 - self.l2)


def reachable(point: CartesianPoint, links: LinkLengths) -> bool:
    """
    Test whether a point lies inside the arm's annular workspace.

    Args:
        point: Target position (meters)
        links: Arm geometry

    Returns:
        True iff |l1 - l2| <= distance <= l1 + l2
    """
    d = np.hypot(point[0], point[1])
    return bool(links.min_reach <= d <= links.max_reach)


def forward_xy(q1, q2, links: LinkLengths):
    """Elementwise forward kinematics on scalars or numpy arrays."""
    x = links.l1 * np.cos(q1) + links.l2 * np.cos(q1 + q2)
    y = links.l1 * np.sin(q1) + links.l2 * np.sin(q1 + q2)
    return x, y


def solve_forward(angles: JointAngles, links: LinkLengths) -> CartesianPoint:
    """
    Compute forward kinematics.

    Args:
        angles: (q1, q2) joint angles in radians
        links: Arm geometry

    Returns:
        TCP position in meters
    """
    x, y = forward_xy(angles[0], angles[1], links)
    return CartesianPoint(float(x), float(y))


def solve_inverse(point: CartesianPoint, links: LinkLengths) -> JointAngles:
    """
    Compute inverse kinematics (elbow-up solution).

    Uses law of cosines to solve for the elbow angle. Only the branch with
    sin(q2) >= 0 is returned. cos(q2) = +-1 is accepted and yields a fully
    extended or fully folded arm.

    Args:
        point: Target TCP position (meters)
        links: Arm geometry

    Returns:
        (q1, q2) joint angles in radians

    Raises:
        UnreachableError: If |cos(q2)| > 1
    """
    x, y = float(point[0]), float(point[1])
    l1, l2 = links.l1, links.l2

    # Elbow angle using law of cosines
    cos_q2 = (x**2 + y**2 - l1**2 - l2**2) / (2 * l1 * l2)
    if abs(cos_q2) > 1:
        raise UnreachableError(x, y, cos_q2)

    q2 = np.arctan2(np.sqrt(1 - cos_q2**2), cos_q2)

    # Shoulder angle
    alpha = np.arctan2(y, x)
    beta = np.arctan2(l2 * np.sin(q2), l1 + l2 * np.cos(q2))
    q1 = alpha - beta

    logger.debug("IK (%.4f, %.4f) -> q1=%.6f q2=%.6f", x, y, q1, q2)
    return JointAngles(float(q1), float(q2))


def joint_positions(
    angles: JointAngles, links: LinkLengths
) -> Tuple[CartesianPoint, CartesianPoint, CartesianPoint, CartesianPoint]:
    """
    Positions of every drawn point of the arm.

    Returns:
        (base, elbow, tcp, gripper_tip); the gripper extends along the
        direction q1 + q2 of link 2
    """
    q1, q2 = angles
    elbow = CartesianPoint(float(links.l1 * np.cos(q1)),
                           float(links.l1 * np.sin(q1)))
    tcp = solve_forward(angles, links)
    tip = CartesianPoint(
        float(tcp.x + links.gripper_length * np.cos(q1 + q2)),
        float(tcp.y + links.gripper_length * np.sin(q1 + q2)),
    )
    return (CartesianPoint(0.0, 0.0), elbow, tcp, tip)
