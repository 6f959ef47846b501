"""
Interpreter session: owns the pipeline state and drives it frame by frame.
"""
import asyncio
import logging
import time
from typing import AsyncIterator, Callable, Optional, Sequence, Set

from .capture import CaptureWorkflow
from .config import Cfg
from .gestures import GestureProcessor
from .library import GestureLibrary
from .types import FrameResult, Landmark, PoseDescriptor, SpeakerProto

logger = logging.getLogger(__name__)

Frame = Optional[Sequence[Landmark]]


class EchoSession:
    """
    Single owner of the library, recognition memory and latest pose.

    Frames are processed one at a time to completion; the capture
    countdown and speech requests run as separate asyncio tasks.
    """

    def __init__(self, cfg: Cfg, library: GestureLibrary, speaker: SpeakerProto,
                 clock: Callable[[], float] = time.time):
        """
        Initialize the session.

        Args:
            cfg: Configuration
            library: Gesture library shared by recognition and capture
            speaker: Audio-output collaborator
            clock: Returns the current time in seconds
        """
        self.cfg = cfg
        self.library = library
        self.speaker = speaker
        self.clock = clock
        self.processor = GestureProcessor(cfg, library)
        self.capture = CaptureWorkflow(cfg, library, self.latest_pose)
        self.current_pose: Optional[PoseDescriptor] = None
        self.is_running = False
        self._tasks: Set[asyncio.Task] = set()

    def latest_pose(self) -> Optional[PoseDescriptor]:
        return self.current_pose

    def handle_frame(self, landmarks: Frame, t_now: Optional[float] = None) -> FrameResult:
        """
        Run the recognition chain for one frame.

        Args:
            landmarks: 21 hand landmarks (None if no hand detected)
            t_now: Frame timestamp in seconds; defaults to the session clock

        Returns:
            Frame result for the display
        """
        if t_now is None:
            t_now = self.clock()

        result = self.processor.process_frame(landmarks, t_now)
        self.current_pose = result.pose

        if result.spoken is not None:
            self._spawn(self.speaker.speak(result.spoken))
        return result

    async def run(self, frames: AsyncIterator[Frame],
                  on_result: Optional[Callable[[FrameResult], None]] = None) -> None:
        """
        Consume frames until the producer ends or stop() is called.

        Args:
            frames: Async iterator of landmark frames
            on_result: Called with each frame result
        """
        self.is_running = True
        try:
            async for landmarks in frames:
                if not self.is_running:
                    break
                result = self.handle_frame(landmarks)
                if on_result is not None:
                    on_result(result)
                if not self.is_running:
                    break
        finally:
            self.is_running = False

    def stop(self) -> None:
        """Stop frame processing; a running countdown keeps going."""
        self.is_running = False

    def start_capture(self, label: Optional[str] = None) -> bool:
        """
        Start a capture countdown in the background.

        Returns:
            True if the countdown started
        """
        if not self.capture.start(label):
            return False
        self._spawn(self.capture.run_countdown())
        return True

    def clear_sentence(self) -> None:
        self.processor.reset()

    def remove_gesture(self, entry_id: str) -> bool:
        return self.library.remove(entry_id)

    def remove_label(self, label: str) -> bool:
        """Delete the entry stored under a label. Returns True if one was removed."""
        entry = self.library.find(label)
        if entry is None:
            logger.info(f"No gesture named '{label}' to remove")
            return False
        return self.remove_gesture(entry.id)

    def clear_library(self) -> None:
        self.library.clear()

    async def drain(self) -> None:
        """Wait for outstanding speech and capture tasks."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Background task failed: {exc}", exc_info=exc)
