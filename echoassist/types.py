"""
Type definitions for the gesture interpreter.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable


# (x, y, z) in normalized image coordinates; z may be omitted by producers
Landmark = Tuple[float, ...]
Point2D = Tuple[float, float]


@dataclass(frozen=True)
class PoseDescriptor:
    """Scale/translation invariant description of one frame's hand pose."""
    normalized: Tuple[Point2D, ...]  # 21 (nx, ny) pairs, wrist at (0, 0)
    curl_states: Tuple[int, ...]  # 5 flags: thumb, index, middle, ring, pinky


@dataclass(frozen=True)
class GestureSample:
    """One captured instance of a gesture."""
    id: str
    normalized: Tuple[Point2D, ...]
    curl_states: Tuple[int, ...]


@dataclass(frozen=True)
class GestureEntry:
    """A labeled gesture and every sample captured for it."""
    id: str
    label: str
    samples: Tuple[GestureSample, ...] = ()


@dataclass(frozen=True)
class Prediction:
    """A library label ranked against the live pose."""
    label: str
    confidence: float


@dataclass
class RecognitionState:
    """Memory the debouncer keeps between frames."""
    last_label: Optional[str] = None
    last_timestamp: Optional[float] = None  # seconds


@dataclass(frozen=True)
class CaptureIdle:
    """No countdown running."""


@dataclass(frozen=True)
class CaptureCounting:
    """Countdown running for a target label."""
    label: str
    ticks_left: int


CaptureState = Union[CaptureIdle, CaptureCounting]


@dataclass
class FrameResult:
    """Everything observable about one processed frame."""
    pose: Optional[PoseDescriptor]
    predictions: List[Prediction] = field(default_factory=list)  # ranked, this frame
    display: List[Prediction] = field(default_factory=list)  # decaying confidence display
    recognized: Optional[str] = None  # label fired by the debouncer
    spoken: Optional[str] = None  # label forwarded to the audio collaborator


@runtime_checkable
class SpeakerProto(Protocol):
    """Audio-output collaborator that voices recognized labels."""

    async def speak(self, label: str) -> None:
        """Speak a recognized label."""
        ...


@runtime_checkable
class LibrarySinkProto(Protocol):
    """Persistence collaborator receiving full library snapshots."""

    def save(self, entries: Sequence[GestureEntry]) -> None:
        """Persist the complete library contents."""
        ...
