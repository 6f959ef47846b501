"""
Spoken output of recognized gestures using Eleven Labs text-to-speech.
"""
import asyncio
import logging
import os
from typing import Callable, Optional, Set

from dotenv import load_dotenv
from elevenlabs import ElevenLabs
from elevenlabs.play import play

from .config import SpeechConfig

logger = logging.getLogger(__name__)


class ElevenLabsSpeaker:
    """
    Speaks labels through Eleven Labs, one playback at a time.

    A label that is already waiting or playing is not requested again.
    """

    def __init__(self, cfg: SpeechConfig, client: Optional[ElevenLabs] = None,
                 player: Callable[[bytes], None] = play):
        """
        Initialize the speaker.

        Args:
            cfg: Speech configuration
            client: Eleven Labs client; built from ELEVEN_LABS_API_KEY if None
            player: Plays encoded audio bytes, blocking until done
        """
        if client is None:
            load_dotenv()
            api_key = os.getenv("ELEVEN_LABS_API_KEY")
            if not api_key:
                raise ValueError("ELEVEN_LABS_API_KEY not found in environment variables")
            client = ElevenLabs(api_key=api_key)

        self.cfg = cfg
        self.client = client
        self.player = player
        self._pending: Set[str] = set()
        self._playback_lock = asyncio.Lock()

    async def speak(self, label: str) -> None:
        """Synthesize and play a label; errors are logged, not raised."""
        if label in self._pending:
            logger.debug(f"'{label}' already queued for speech")
            return

        self._pending.add(label)
        try:
            audio_bytes = await asyncio.to_thread(self._synthesize, label)
            async with self._playback_lock:
                await asyncio.to_thread(self.player, audio_bytes)
        except Exception as e:
            logger.error(f"TTS failed for '{label}': {e}")
        finally:
            self._pending.discard(label)

    def _synthesize(self, text: str) -> bytes:
        audio_generator = self.client.text_to_speech.convert(
            text=text,
            voice_id=self.cfg.voice_id,
            model_id=self.cfg.model_id,
            output_format=self.cfg.output_format,
        )
        return b"".join(audio_generator)
