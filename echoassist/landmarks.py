"""
Hand landmark detection using MediaPipe.
"""
import cv2
import mediapipe as mp
import numpy as np
from typing import Optional, List, Sequence

from .pose import FINGER_TIPS
from .types import Landmark


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 1, model_complexity: int = 1,
                 min_detection_conf: float = 0.8, min_tracking_conf: float = 0.8):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            model_complexity: 0 for the lite model, 1 for the full model
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_bgr: np.ndarray) -> Optional[List[Landmark]]:
        """
        Process a frame and return hand landmarks.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            List of 21 (x, y, z) coordinates, or None if no hand detected
        """
        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        results = self.hands.process(frame_rgb)
        return landmarks_from_results(results)

    def close(self) -> None:
        self.hands.close()


def landmarks_from_results(results) -> Optional[List[Landmark]]:
    """Extract the first hand's landmarks from a MediaPipe Hands result."""
    if not results.multi_hand_landmarks:
        return None

    hand_landmarks = results.multi_hand_landmarks[0]
    return [(lm.x, lm.y, lm.z) for lm in hand_landmarks.landmark]


def draw_landmarks(frame: np.ndarray, landmarks: Sequence[Landmark],
                   curl_states: Sequence[int]) -> np.ndarray:
    """
    Draw hand landmarks on the frame, highlighting curled fingertips.

    Args:
        frame: Input frame
        landmarks: List of (x, y[, z]) coordinates in [0..1] range
        curl_states: Five curl flags from the pose descriptor

    Returns:
        Frame with landmarks drawn
    """
    height, width = frame.shape[:2]

    for start, end in mp.solutions.hands.HAND_CONNECTIONS:
        p1 = (int(landmarks[start][0] * width), int(landmarks[start][1] * height))
        p2 = (int(landmarks[end][0] * width), int(landmarks[end][1] * height))
        cv2.line(frame, p1, p2, (241, 102, 99), 2)

    for i, lm in enumerate(landmarks):
        px = int(lm[0] * width)
        py = int(lm[1] * height)
        if i in FINGER_TIPS:
            curled = curl_states[FINGER_TIPS.index(i)] == 1
            color = (133, 113, 251) if curled else (248, 140, 129)
            cv2.circle(frame, (px, py), 6, color, -1)
        else:
            cv2.circle(frame, (px, py), 3, (248, 140, 129), -1)

    return frame
