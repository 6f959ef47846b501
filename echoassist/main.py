"""
Main application for the gesture interpreter.
"""
import argparse
import asyncio
import logging
from typing import List, Optional

import cv2

from .config import load_config
from .controller_mock import MockSpeaker
from .landmarks import HandsTracker, draw_landmarks
from .library import GestureLibrary
from .session import EchoSession
from .speech import ElevenLabsSpeaker
from .storage import JsonLibraryFile
from .types import FrameResult

logger = logging.getLogger(__name__)


class InterpreterApp:
    """Camera loop that feeds hand landmarks into an interpreter session."""

    def __init__(self, config_path: Optional[str] = None, use_speech: bool = True,
                 library_path: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.tracker = HandsTracker(
            max_num_hands=self.config.mediapipe.max_num_hands,
            model_complexity=self.config.mediapipe.model_complexity,
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )

        self.storage = JsonLibraryFile(library_path or self.config.storage.library_path)
        self.library = GestureLibrary(self.storage.load(), sink=self.storage)

        # Choose speaker type
        self.speaker = MockSpeaker()
        if use_speech and self.config.speech.enabled:
            try:
                self.speaker = ElevenLabsSpeaker(self.config.speech)
                logger.info("🔊 Using Eleven Labs speech output")
            except ValueError as e:
                logger.warning(f"⚠️  {e}, using mock speaker")

        self.session = EchoSession(self.config, self.library, self.speaker)

        self.teach_label: Optional[str] = None
        self._frame = None
        self._landmarks = None

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    async def frames(self):
        """Yield landmarks for each camera frame, None when no hand is visible."""
        while True:
            ret, frame = self.cap.read()
            if not ret:
                logger.error("Failed to read frame from camera")
                break

            self._frame = frame
            self._landmarks = self.tracker.process(frame)
            yield self._landmarks

            # Let countdown and speech tasks run between frames
            await asyncio.sleep(0)

    def render(self, result: FrameResult) -> None:
        """Draw the frame result and handle key presses."""
        frame = self._frame
        if frame is None:
            return

        if self._landmarks is not None and result.pose is not None and self.config.display.show_landmarks:
            frame = draw_landmarks(frame, self._landmarks, result.pose.curl_states)

        status_text = "No hand detected" if result.pose is None else "Hand detected"
        cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)

        for i, prediction in enumerate(result.display):
            text = f"{prediction.label}: {prediction.confidence * 100:.0f}%"
            cv2.putText(frame, text, (10, 60 + i * 25), cv2.FONT_HERSHEY_SIMPLEX, 0.6,
                        (0, 255, 0) if i == 0 else (200, 200, 200), 2)

        sentence = self.session.processor.sentence.text()
        if sentence:
            cv2.putText(frame, sentence, (10, frame.shape[0] - 100), cv2.FONT_HERSHEY_SIMPLEX, 0.8, (255, 255, 0), 2)

        ticks_left = self.session.capture.ticks_left
        if ticks_left is not None:
            cv2.putText(frame, str(ticks_left), (frame.shape[1] // 2, frame.shape[0] // 2),
                        cv2.FONT_HERSHEY_SIMPLEX, 3.0, (0, 0, 255), 5)

        label = self.teach_label or "-"
        cv2.putText(frame, f"Teach: {label} | {len(self.library)} gestures", (10, frame.shape[0] - 60),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, "c = capture, d = delete, x = clear sentence, q = quit", (10, frame.shape[0] - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)

        cv2.imshow(self.config.display.window_name, frame)

        key = cv2.waitKey(1) & 0xFF
        if key == ord('q'):
            self.session.stop()
        elif key == ord('c'):
            if not self.session.start_capture(self.teach_label):
                logger.info("Capture needs a label (--teach), a visible hand and no running countdown")
        elif key == ord('d'):
            if not self.teach_label or not self.session.remove_label(self.teach_label):
                logger.info("Delete needs the label of a stored gesture (--teach)")
        elif key == ord('x'):
            self.session.clear_sentence()

    async def run(self, teach_label: Optional[str] = None):
        """Run the main application loop."""
        logger.info(f"Starting {self.config.display.window_name} with {len(self.library)} gestures")
        self.teach_label = teach_label

        try:
            await self.session.run(self.frames(), on_result=self.render)
            await self.session.drain()
        finally:
            self.cap.release()
            self.tracker.close()
            cv2.destroyAllWindows()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recognize trained hand gestures and speak them.")
    parser.add_argument("--config", help="Path to a YAML config file")
    parser.add_argument("--library", help="Path to the gesture library JSON file")
    parser.add_argument("--teach", metavar="LABEL", help="Label captured when 'c' is pressed")
    parser.add_argument("--mute", action="store_true", help="Log recognized words instead of speaking")
    parser.add_argument("--remove", metavar="LABEL", help="Delete the gesture stored under LABEL and exit")
    parser.add_argument("--clear-library", action="store_true", help="Delete all gestures and exit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None):
    """Entry point for the application."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    if args.clear_library:
        config = load_config(args.config)
        storage = JsonLibraryFile(args.library or config.storage.library_path)
        GestureLibrary(storage.load(), sink=storage).clear()
        return

    if args.remove:
        config = load_config(args.config)
        storage = JsonLibraryFile(args.library or config.storage.library_path)
        library = GestureLibrary(storage.load(), sink=storage)
        entry = library.find(args.remove)
        if entry is None:
            logger.error(f"No gesture named '{args.remove}'")
        else:
            library.remove(entry.id)
        return

    try:
        app = InterpreterApp(config_path=args.config, use_speech=not args.mute,
                             library_path=args.library)
        await app.run(teach_label=args.teach)
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except (FileNotFoundError, RuntimeError) as e:
        logger.error(f"Error: {e}")


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
