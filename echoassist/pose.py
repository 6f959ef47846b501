"""
Pose descriptors built from raw hand landmarks.

Normalization and curl extraction only look at the (x, y) image plane;
depth from a monocular tracker is too noisy to be useful here.
"""
import math
from typing import Sequence, Tuple

from .types import Landmark, Point2D, PoseDescriptor

NUM_LANDMARKS = 21
WRIST = 0
PALM_BASE = 9  # middle finger MCP

# Finger tip and pre-tip joint indices: thumb, index, middle, ring, pinky
FINGER_TIPS = (4, 8, 12, 16, 20)
FINGER_PIPS = (2, 6, 10, 14, 18)

MIN_PALM_SCALE = 0.01


def _distance_2d(a: Landmark, b: Landmark) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _check_landmarks(landmarks: Sequence[Landmark]) -> None:
    if len(landmarks) != NUM_LANDMARKS:
        raise ValueError(f"Expected {NUM_LANDMARKS} landmarks, got {len(landmarks)}")


def palm_scale(landmarks: Sequence[Landmark]) -> float:
    """
    Distance from the wrist to the middle finger base.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        Palm scale, never smaller than MIN_PALM_SCALE
    """
    return max(_distance_2d(landmarks[WRIST], landmarks[PALM_BASE]), MIN_PALM_SCALE)


def normalize_landmarks(landmarks: Sequence[Landmark]) -> Tuple[Point2D, ...]:
    """
    Translate landmarks to the wrist and divide by the palm scale.

    Args:
        landmarks: List of 21 hand landmarks, (x, y) or (x, y, z)

    Returns:
        21 (nx, ny) pairs; the first one is always (0.0, 0.0)
    """
    _check_landmarks(landmarks)
    wrist = landmarks[WRIST]
    scale = palm_scale(landmarks)

    return tuple(
        ((lm[0] - wrist[0]) / scale, (lm[1] - wrist[1]) / scale)
        for lm in landmarks
    )


def curl_states(landmarks: Sequence[Landmark]) -> Tuple[int, ...]:
    """
    Classify each finger as curled (1) or extended (0).

    A finger counts as curled when its tip is closer to the wrist than its
    pre-tip joint. Unusual hand orientations can fool this.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        Five flags in thumb, index, middle, ring, pinky order
    """
    _check_landmarks(landmarks)
    wrist = landmarks[WRIST]

    states = []
    for tip_idx, pip_idx in zip(FINGER_TIPS, FINGER_PIPS):
        tip_dist = _distance_2d(landmarks[tip_idx], wrist)
        pip_dist = _distance_2d(landmarks[pip_idx], wrist)
        states.append(1 if tip_dist < pip_dist else 0)

    return tuple(states)


def describe_pose(landmarks: Sequence[Landmark]) -> PoseDescriptor:
    """Build the pose descriptor for one frame of landmarks."""
    return PoseDescriptor(
        normalized=normalize_landmarks(landmarks),
        curl_states=curl_states(landmarks),
    )
