"""Fixed robot configuration used when no overrides are given."""

import numpy as np

from planar_arm.kinematics import CartesianPoint, JointAngles, LinkLengths

# Links of 12 cm each with a 2 cm gripper
DEFAULT_LINKS = LinkLengths(l1=0.12, l2=0.12, gripper_length=0.02)

# Target of the "go home" command
HOME_POSITION = CartesianPoint(0.14, 0.14)

# Pose held before the first move: shoulder at 90 degrees, elbow straight
HOME_ANGLES = JointAngles(np.pi / 2, 0.0)

# Trajectory horizon: 100 intervals over 20 seconds
DEFAULT_SAMPLE_COUNT = 101
DEFAULT_DURATION = 20.0
