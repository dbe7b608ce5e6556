"""Exceptions raised by the planar arm kinematics layer."""


class KinematicsError(ValueError):
    """Base class for rejected targets and inputs."""


class OutOfWorkspaceError(KinematicsError):
    """Target lies outside the annulus reachable by the arm."""

    def __init__(self, x: float, y: float, min_reach: float, max_reach: float):
        self.x = x
        self.y = y
        super().__init__(
            f"Target ({x:.3f}, {y:.3f}) outside workspace "
            f"(reach {min_reach:.3f}m to {max_reach:.3f}m)"
        )


class UnreachableError(KinematicsError):
    """Inverse kinematics has no real solution (|cos(q2)| > 1)."""

    def __init__(self, x: float, y: float, cos_q2: float):
        self.x = x
        self.y = y
        self.cos_q2 = cos_q2
        super().__init__(f"Target ({x:.3f}, {y:.3f}) unreachable "
                         f"(cos(q2) = {cos_q2:.6f})")


class InvalidInputError(KinematicsError):
    """Target coordinates are missing, non-numeric or not finite."""
