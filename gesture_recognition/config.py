"""
Configuration management for the gesture recognition pipeline.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass

from .types import BufferPolicy


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int
    rotation: int  # degrees, sensor to display
    mirror: bool  # front-facing capture


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class RecognizerConfig:
    """Sequence window and hand-loss hysteresis."""
    sequence_length: int
    num_features: int
    max_missed_frames: int
    policy: BufferPolicy


@dataclass
class NormalizationConfig:
    """Landmark normalization constants."""
    min_scale: float
    clip_range: float


@dataclass
class SmoothingConfig:
    """Majority-vote smoothing of per-frame predictions."""
    window_size: int
    stability_threshold: float
    min_samples: int


@dataclass
class ClassifierConfig:
    """Sequence classifier settings."""
    model_path: str
    labels: List[str]
    confidence_threshold: float


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    show_probabilities: bool
    window_name: str


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    recognizer: RecognizerConfig
    normalization: NormalizationConfig
    smoothing: SmoothingConfig
    classifier: ClassifierConfig
    display: DisplayConfig
    logging: LoggingConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml

    Returns:
        Configuration object with all settings
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
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
        fps=camera_data['fps'],
        rotation=camera_data.get('rotation', 0),
        mirror=camera_data.get('mirror', False)
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    rec_data = data['recognizer']
    recognizer = RecognizerConfig(
        sequence_length=rec_data['sequence_length'],
        num_features=rec_data['num_features'],
        max_missed_frames=rec_data['max_missed_frames'],
        policy=BufferPolicy(rec_data.get('policy', BufferPolicy.CONTINUOUS.value))
    )

    norm_data = data['normalization']
    normalization = NormalizationConfig(
        min_scale=float(norm_data['min_scale']),
        clip_range=float(norm_data['clip_range'])
    )

    smooth_data = data['smoothing']
    smoothing = SmoothingConfig(
        window_size=smooth_data['window_size'],
        stability_threshold=smooth_data['stability_threshold'],
        min_samples=smooth_data['min_samples']
    )

    clf_data = data['classifier']
    classifier = ClassifierConfig(
        model_path=clf_data['model_path'],
        labels=list(clf_data['labels']),
        confidence_threshold=clf_data['confidence_threshold']
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        show_probabilities=display_data['show_probabilities'],
        window_name=display_data['window_name']
    )

    logging_cfg = LoggingConfig(level=data.get('logging', {}).get('level', 'INFO'))

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        recognizer=recognizer,
        normalization=normalization,
        smoothing=smoothing,
        classifier=classifier,
        display=display,
        logging=logging_cfg
    )
