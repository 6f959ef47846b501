"""
Gesture classification and debouncing that turn hand poses into recognition events.
"""
import logging
from collections import deque
from typing import Deque, Iterable, List, Optional, Sequence

from .config import Cfg
from .library import GestureLibrary
from .pose import describe_pose
from .similarity import similarity
from .types import FrameResult, GestureEntry, Landmark, PoseDescriptor, Prediction, RecognitionState

logger = logging.getLogger(__name__)

MAX_EVENTS = 100


class GestureClassifier:
    """
    Ranks library entries against the live pose.

    Features:
    - Best single sample decides an entry's confidence
    - Hard floor on listed candidates
    - No state carried between frames
    """

    def __init__(self, cfg: Cfg):
        """Initialize classifier thresholds from configuration."""
        self.floor = cfg.recognition.candidate_floor
        self.max_candidates = cfg.recognition.max_candidates

    def rank(self, pose: PoseDescriptor, entries: Iterable[GestureEntry]) -> List[Prediction]:
        """
        Score every entry and return the top candidates.

        Args:
            pose: Pose descriptor of the current frame
            entries: Library entries to compare against

        Returns:
            Up to max_candidates predictions above the floor, best first
        """
        predictions = []
        for entry in entries:
            if not entry.samples:
                continue
            best = max(similarity(pose, sample) for sample in entry.samples)
            if best > self.floor:
                predictions.append(Prediction(label=entry.label, confidence=best))

        predictions.sort(key=lambda p: p.confidence, reverse=True)
        return predictions[:self.max_candidates]


class RecognitionDebouncer:
    """
    Converts the per-frame top candidate into one event per performance.

    A different label may fire once the switch cooldown has passed; the
    same label needs the longer repeat cooldown so a held pose does not
    fire over and over.
    """

    def __init__(self, cfg: Cfg):
        """Initialize debouncer with configuration."""
        self.accept_threshold = cfg.recognition.accept_threshold
        self.switch_cooldown_s = cfg.recognition.switch_cooldown_ms / 1000.0
        self.repeat_cooldown_s = cfg.recognition.repeat_cooldown_ms / 1000.0
        self.state = RecognitionState()
        self.events: Deque[str] = deque(maxlen=MAX_EVENTS)  # most recent fired labels

    def update(self, predictions: Sequence[Prediction], t_now: float) -> Optional[str]:
        """
        Process this frame's ranked candidates.

        Args:
            predictions: Ranked candidates, best first
            t_now: Current timestamp in seconds

        Returns:
            Label of the recognition event fired this frame, or None
        """
        if not predictions:
            return None

        top = predictions[0]
        if top.confidence <= self.accept_threshold:
            return None

        if not self._should_fire(top.label, t_now):
            return None

        self.state.last_label = top.label
        self.state.last_timestamp = t_now
        self.events.append(top.label)
        logger.info(f"Recognized '{top.label}' ({top.confidence:.2f})")
        return top.label

    def _should_fire(self, label: str, t_now: float) -> bool:
        if self.state.last_label is None:
            return True

        elapsed = t_now - self.state.last_timestamp
        if label != self.state.last_label:
            return elapsed > self.switch_cooldown_s
        return elapsed > self.repeat_cooldown_s

    def reset(self) -> None:
        """Forget the last recognition and the event log."""
        self.state = RecognitionState()
        self.events.clear()


class SentenceBuffer:
    """Recognized words shown to the user, without adjacent repeats."""

    def __init__(self):
        self.words: List[str] = []

    def append(self, label: str) -> bool:
        """Append a label unless it repeats the last word. Returns True if appended."""
        if self.words and self.words[-1] == label:
            return False
        self.words.append(label)
        return True

    def clear(self) -> None:
        self.words.clear()

    def text(self) -> str:
        return " ".join(self.words)


class SpeechGate:
    """Keeps the audio collaborator from hearing the same label twice in a row."""

    def __init__(self):
        self.last_spoken: Optional[str] = None

    def allow(self, label: str) -> bool:
        if label == self.last_spoken:
            logger.debug(f"Skipping repeated speech for '{label}'")
            return False
        self.last_spoken = label
        return True

    def reset(self) -> None:
        self.last_spoken = None


class PredictionDisplay:
    """Confidence display that empties itself when it stops being refreshed."""

    def __init__(self, cfg: Cfg):
        self.clear_after_s = cfg.recognition.display_clear_ms / 1000.0
        self.predictions: List[Prediction] = []
        self.updated_at: Optional[float] = None

    def update(self, predictions: Sequence[Prediction], t_now: float) -> None:
        self.predictions = list(predictions)
        self.updated_at = t_now

    def current(self, t_now: float) -> List[Prediction]:
        """Predictions still on display at t_now."""
        if self.updated_at is not None and t_now - self.updated_at >= self.clear_after_s:
            self.clear()
        return list(self.predictions)

    def clear(self) -> None:
        self.predictions = []
        self.updated_at = None


class GestureProcessor:
    """
    Main gesture processor that runs the per-frame recognition chain.
    """

    def __init__(self, cfg: Cfg, library: GestureLibrary):
        """
        Initialize gesture processor.

        Args:
            cfg: Configuration
            library: Gesture library consulted every frame
        """
        self.cfg = cfg
        self.library = library
        self.classifier = GestureClassifier(cfg)
        self.debouncer = RecognitionDebouncer(cfg)
        self.sentence = SentenceBuffer()
        self.speech_gate = SpeechGate()
        self.display = PredictionDisplay(cfg)

    def process_frame(self, landmarks: Optional[Sequence[Landmark]], t_now: float) -> FrameResult:
        """
        Process one frame of landmarks.

        Args:
            landmarks: 21 hand landmarks (None if no hand detected)
            t_now: Current timestamp in seconds

        Returns:
            Frame result with pose, candidates and any recognition
        """
        if landmarks is None:
            self.display.clear()
            return FrameResult(pose=None)

        pose = describe_pose(landmarks)
        return self.process_pose(pose, t_now)

    def process_pose(self, pose: PoseDescriptor, t_now: float) -> FrameResult:
        """Classify and debounce an already built pose descriptor."""
        predictions = self.classifier.rank(pose, self.library)

        if predictions and predictions[0].confidence > self.debouncer.accept_threshold:
            self.display.update(predictions, t_now)

        recognized = self.debouncer.update(predictions, t_now)
        spoken = None
        if recognized is not None:
            self.sentence.append(recognized)
            if self.speech_gate.allow(recognized):
                spoken = recognized

        return FrameResult(
            pose=pose,
            predictions=predictions,
            display=self.display.current(t_now),
            recognized=recognized,
            spoken=spoken,
        )

    def reset(self) -> None:
        """Clear the sentence and the recognition memory."""
        self.debouncer.reset()
        self.sentence.clear()
        self.speech_gate.reset()
        logger.info("Cleared sentence")
