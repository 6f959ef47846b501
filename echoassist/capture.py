"""
Timed sample capture: count down, then store whatever pose the hand holds.
"""
import asyncio
import logging
from typing import Callable, Optional

from .config import Cfg
from .library import GestureLibrary, normalize_label
from .types import CaptureCounting, CaptureIdle, CaptureState, GestureEntry, PoseDescriptor

logger = logging.getLogger(__name__)


class CaptureWorkflow:
    """
    Countdown state machine that adds samples to the gesture library.

    The pose is read on the final tick, not at start, so the user can
    settle into the gesture during the countdown.
    """

    def __init__(self, cfg: Cfg, library: GestureLibrary,
                 pose_source: Callable[[], Optional[PoseDescriptor]]):
        """
        Initialize the capture workflow.

        Args:
            cfg: Configuration
            library: Library that receives captured samples
            pose_source: Returns the latest pose descriptor, or None without a hand
        """
        self.library = library
        self.pose_source = pose_source
        self.countdown_ticks = cfg.capture.countdown_ticks
        self.tick_interval_s = cfg.capture.tick_interval_s
        self.state: CaptureState = CaptureIdle()
        self.label = ""  # target label input, cleared after a capture

    @property
    def is_counting(self) -> bool:
        return isinstance(self.state, CaptureCounting)

    @property
    def ticks_left(self) -> Optional[int]:
        """Countdown value to display, or None when idle."""
        if isinstance(self.state, CaptureCounting):
            return self.state.ticks_left
        return None

    def start(self, label: Optional[str] = None) -> bool:
        """
        Begin a countdown for a label.

        Does nothing if the label is blank, no pose is available, or a
        countdown is already running.

        Args:
            label: Target label; defaults to the current label input

        Returns:
            True if a countdown started
        """
        if label is not None:
            self.label = label
        target = normalize_label(self.label)

        if not target or self.pose_source() is None or self.is_counting:
            return False

        self.state = CaptureCounting(label=target, ticks_left=self.countdown_ticks)
        logger.info(f"Capturing '{target}' in {self.countdown_ticks}...")
        return True

    def tick(self) -> Optional[GestureEntry]:
        """
        Advance the countdown by one tick.

        Returns:
            The updated library entry when this tick completed a capture
        """
        state = self.state
        if not isinstance(state, CaptureCounting):
            return None

        if state.ticks_left > 1:
            self.state = CaptureCounting(label=state.label, ticks_left=state.ticks_left - 1)
            return None

        self.state = CaptureIdle()
        pose = self.pose_source()
        if pose is None:
            logger.warning(f"Hand lost before capture of '{state.label}', nothing saved")
            return None

        entry = self.library.add_sample(state.label, pose)
        self.label = ""
        return entry

    def cancel(self) -> None:
        """Abort a running countdown without saving."""
        if self.is_counting:
            logger.info("Capture cancelled")
        self.state = CaptureIdle()

    async def run_countdown(self) -> Optional[GestureEntry]:
        """
        Drive the countdown with a periodic tick until it finishes.

        Returns:
            The updated library entry, or None if nothing was saved
        """
        entry = None
        while self.is_counting:
            await asyncio.sleep(self.tick_interval_s)
            entry = self.tick()
        return entry
