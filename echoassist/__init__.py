"""
EchoAssist Gesture Interpreter

Recognizes user-trained hand gestures from MediaPipe hand landmarks,
turns them into debounced word events, and speaks them aloud.
"""

__version__ = "0.1.0"
__author__ = "EchoAssist Team"

from .types import (
    PoseDescriptor,
    GestureSample,
    GestureEntry,
    Prediction,
    FrameResult,
    SpeakerProto,
    LibrarySinkProto,
)
from .config import load_config, Cfg
from .pose import describe_pose, normalize_landmarks, curl_states
from .similarity import similarity
from .library import GestureLibrary, normalize_label
from .gestures import GestureClassifier, RecognitionDebouncer, GestureProcessor
from .capture import CaptureWorkflow
from .session import EchoSession
from .storage import JsonLibraryFile
from .controller_mock import MockSpeaker

__all__ = [
    "PoseDescriptor",
    "GestureSample",
    "GestureEntry",
    "Prediction",
    "FrameResult",
    "SpeakerProto",
    "LibrarySinkProto",
    "load_config",
    "Cfg",
    "describe_pose",
    "normalize_landmarks",
    "curl_states",
    "similarity",
    "GestureLibrary",
    "normalize_label",
    "GestureClassifier",
    "RecognitionDebouncer",
    "GestureProcessor",
    "CaptureWorkflow",
    "EchoSession",
    "JsonLibraryFile",
    "MockSpeaker",
]
