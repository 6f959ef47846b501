"""
Similarity between a live pose and a stored gesture sample.
"""
from typing import Union

import numpy as np

from .types import GestureSample, PoseDescriptor

# Fingertips (4, 8, 12, 16, 20) carry most of the shape information
LANDMARK_WEIGHTS = np.array(
    [1, 1, 1, 1, 4, 1, 1, 1, 4, 1, 1, 1, 4, 1, 1, 1, 4, 1, 1, 1, 4],
    dtype=np.float64,
)

GEOMETRY_SCALE = 2.2  # mean weighted distance of ~0.45 palm lengths scores zero
GEOMETRY_WEIGHT = 0.7
STATE_WEIGHT = 0.3

Pose = Union[PoseDescriptor, GestureSample]


def geometry_score(live: Pose, saved: Pose) -> float:
    """
    Score how close two normalized landmark sets are.

    Args:
        live: Pose descriptor of the current frame
        saved: Stored sample (or another descriptor)

    Returns:
        1.0 for identical geometry, falling linearly to 0.0
    """
    a = np.asarray(live.normalized, dtype=np.float64)
    b = np.asarray(saved.normalized, dtype=np.float64)
    if a.shape != (len(LANDMARK_WEIGHTS), 2) or b.shape != a.shape:
        raise ValueError(f"Expected 21x2 normalized landmarks, got {a.shape} and {b.shape}")

    distances = np.hypot(a[:, 0] - b[:, 0], a[:, 1] - b[:, 1])
    mean_dist = float(np.sum(distances * LANDMARK_WEIGHTS) / np.sum(LANDMARK_WEIGHTS))
    return max(0.0, 1.0 - mean_dist * GEOMETRY_SCALE)


def state_score(live: Pose, saved: Pose) -> float:
    """Fraction of fingers whose curl state agrees."""
    if len(live.curl_states) != 5 or len(saved.curl_states) != 5:
        raise ValueError("Expected 5 curl states per pose")
    matches = sum(1 for a, b in zip(live.curl_states, saved.curl_states) if a == b)
    return matches / 5


def similarity(live: Pose, saved: Pose) -> float:
    """
    Blend geometric and curl-state agreement into one confidence.

    Symmetric in its arguments; identical poses score exactly 1.0.
    """
    return GEOMETRY_WEIGHT * geometry_score(live, saved) + STATE_WEIGHT * state_score(live, saved)
