"""Joint-space trajectories with quintic time scaling.

A move from a start pose to a target pose is sampled eagerly over a fixed
horizon. Each joint follows

    q(t) = q_start + (q_target - q_start) * h(tau)
    h(tau) = 10 tau^3 - 15 tau^4 + 6 tau^5,  tau = (t - t0) / (tf - t0)

which gives zero velocity and zero acceleration at both ends. The TCP path is
obtained by forward kinematics of every sample.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, NamedTuple, Tuple, Union

import numpy as np

from planar_arm.config import DEFAULT_DURATION, DEFAULT_SAMPLE_COUNT
from planar_arm.kinematics import (
    CartesianPoint, JointAngles, LinkLengths, forward_xy
)

logger = logging.getLogger(__name__)


class TrajectorySample(NamedTuple):
    """One time step of a trajectory."""
    t: float
    q1: float
    q2: float
    x: float
    y: float


def quintic_blend(tau: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Quintic time scaling h(tau) = 10 tau^3 - 15 tau^4 + 6 tau^5.

    h(0) = 0 and h(1) = 1 exactly; h' and h'' vanish at both ends.

    Args:
        tau: Normalized time in [0, 1] (scalar or array)

    Returns:
        Blend fraction, same shape as tau
    """
    return 10 * tau**3 - 15 * tau**4 + 6 * tau**5


def _frozen(values: np.ndarray) -> np.ndarray:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Trajectory:
    """
    Sampled path of a single move.

    Arrays are read-only and aligned by index. Indexing and iteration
    yield TrajectorySample tuples.
    """

    time: np.ndarray
    q1: np.ndarray
    q2: np.ndarray
    x: np.ndarray
    y: np.ndarray

    def __post_init__(self):
        arrays = [_frozen(getattr(self, name))
                  for name in ('time', 'q1', 'q2', 'x', 'y')]
        lengths = {len(a) for a in arrays}
        if len(lengths) != 1 or 0 in lengths:
            raise ValueError(f"Trajectory arrays must share a non-zero "
                             f"length, got {sorted(lengths)}")
        for name, array in zip(('time', 'q1', 'q2', 'x', 'y'), arrays):
            object.__setattr__(self, name, array)

    def __len__(self) -> int:
        return len(self.time)

    def __getitem__(self, index: int) -> TrajectorySample:
        return TrajectorySample(float(self.time[index]),
                                float(self.q1[index]), float(self.q2[index]),
                                float(self.x[index]), float(self.y[index]))

    def __iter__(self) -> Iterator[TrajectorySample]:
        for i in range(len(self)):
            yield self[i]

    @property
    def samples(self) -> Tuple[TrajectorySample, ...]:
        return tuple(self)

    @property
    def cartesian_points(self) -> Tuple[CartesianPoint, ...]:
        """TCP path, used for trail drawing."""
        return tuple(CartesianPoint(float(x), float(y))
                     for x, y in zip(self.x, self.y))

    @property
    def final_angles(self) -> JointAngles:
        return JointAngles(float(self.q1[-1]), float(self.q2[-1]))

    def joint_series(self) -> Dict[str, List[float]]:
        """
        Joint histories for plotting.

        Returns:
            Dict with 'time', 'q1', 'q2' lists aligned by index
        """
        return {
            'time': self.time.tolist(),
            'q1': self.q1.tolist(),
            'q2': self.q2.tolist(),
        }


def generate(
    start: JointAngles,
    target: JointAngles,
    links: LinkLengths,
    sample_count: int = DEFAULT_SAMPLE_COUNT,
    duration: float = DEFAULT_DURATION,
    t0: float = 0.0,
) -> Trajectory:
    """
    Blend from start to target joint angles over [t0, t0 + duration].

    Args:
        start: Joint angles at t0 (radians)
        target: Joint angles at t0 + duration (radians)
        links: Arm geometry for the Cartesian path
        sample_count: Number of samples, both ends included
        duration: Length of the horizon (seconds)
        t0: Start time (seconds)

    Returns:
        Trajectory with sample_count samples; the first sample equals start
        and the last equals target exactly

    Raises:
        ValueError: If sample_count < 2 or duration <= 0
    """
    if sample_count < 2:
        raise ValueError(f"sample_count must be at least 2, got {sample_count}")
    if not duration > 0:
        raise ValueError(f"Duration must be positive, got {duration}")

    tau = np.linspace(0.0, 1.0, sample_count)
    h = quintic_blend(tau)
    time = t0 + duration * tau

    # Weighted form keeps both endpoints bit-exact
    q1 = start[0] * (1 - h) + target[0] * h
    q2 = start[1] * (1 - h) + target[1] * h

    x, y = forward_xy(q1, q2, links)

    logger.debug("Trajectory (%.4f, %.4f) -> (%.4f, %.4f), %d samples over %.1fs",
                 start[0], start[1], target[0], target[1],
                 sample_count, duration)
    return Trajectory(time=time, q1=q1, q2=q2, x=x, y=y)
