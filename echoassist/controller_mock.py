"""
Mock speaker implementation for running without text-to-speech.
"""
import logging
from typing import List

logger = logging.getLogger(__name__)


class MockSpeaker:
    """Mock speaker that logs labels instead of playing them."""

    def __init__(self):
        """Initialize the mock speaker."""
        self.spoken: List[str] = []

    async def speak(self, label: str) -> None:
        """Record and log a label instead of speaking it."""
        self.spoken.append(label)
        logger.info(f"[MockSpeaker] Speak: '{label}' (call #{len(self.spoken)})")

    def reset_counters(self) -> None:
        """Forget recorded labels for testing."""
        self.spoken.clear()
