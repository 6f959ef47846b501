"""
Configuration management for the gesture interpreter.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    model_complexity: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class RecognitionConfig:
    """Classifier and debouncer thresholds."""
    candidate_floor: float  # candidates must score above this to be listed
    accept_threshold: float  # top candidate must score above this to fire
    max_candidates: int
    switch_cooldown_ms: int  # different label after the last recognition
    repeat_cooldown_ms: int  # same label after the last recognition
    display_clear_ms: int


@dataclass
class CaptureConfig:
    """Sample capture countdown configuration."""
    countdown_ticks: int
    tick_interval_s: float


@dataclass
class StorageConfig:
    """Gesture library persistence settings."""
    library_path: str


@dataclass
class SpeechConfig:
    """Text-to-speech settings."""
    enabled: bool
    voice_id: str
    model_id: str
    output_format: str


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    window_name: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    recognition: RecognitionConfig
    capture: CaptureConfig
    storage: StorageConfig
    speech: SpeechConfig
    display: DisplayConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        path = Path(__file__).parent / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        model_complexity=mp_data['model_complexity'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    rec_data = data['recognition']
    recognition = RecognitionConfig(
        candidate_floor=rec_data['candidate_floor'],
        accept_threshold=rec_data['accept_threshold'],
        max_candidates=rec_data['max_candidates'],
        switch_cooldown_ms=rec_data['switch_cooldown_ms'],
        repeat_cooldown_ms=rec_data['repeat_cooldown_ms'],
        display_clear_ms=rec_data['display_clear_ms']
    )

    capture_data = data['capture']
    capture = CaptureConfig(
        countdown_ticks=capture_data['countdown_ticks'],
        tick_interval_s=capture_data['tick_interval_s']
    )

    storage = StorageConfig(library_path=data['storage']['library_path'])

    speech_data = data['speech']
    speech = SpeechConfig(
        enabled=speech_data['enabled'],
        voice_id=speech_data['voice_id'],
        model_id=speech_data['model_id'],
        output_format=speech_data['output_format']
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        window_name=display_data['window_name']
    )

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        recognition=recognition,
        capture=capture,
        storage=storage,
        speech=speech,
        display=display
    )
