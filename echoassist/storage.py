"""
JSON file persistence for the gesture library.
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Annotated, List, Literal, Sequence, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .library import normalize_label
from .pose import NUM_LANDMARKS
from .types import GestureEntry, GestureSample

logger = logging.getLogger(__name__)

STORAGE_KEY = "echoassist_stable_v1"
NUM_FINGERS = 5


class SampleModel(BaseModel):
    id: str
    normalized: Annotated[List[Tuple[float, float]], Field(min_length=NUM_LANDMARKS, max_length=NUM_LANDMARKS)]
    curl_states: Annotated[List[Literal[0, 1]], Field(min_length=NUM_FINGERS, max_length=NUM_FINGERS)]


class EntryModel(BaseModel):
    id: str
    label: str
    samples: Annotated[List[SampleModel], Field(min_length=1)]

    @field_validator("label")
    @classmethod
    def label_is_normalized(cls, value: str) -> str:
        label = normalize_label(value)
        if not label:
            raise ValueError("Gesture label must not be empty")
        return label


class LibraryFileModel(BaseModel):
    key: str = STORAGE_KEY
    entries: List[EntryModel]

    @model_validator(mode="after")
    def labels_are_unique(self) -> "LibraryFileModel":
        seen = set()
        for entry in self.entries:
            if entry.label in seen:
                raise ValueError(f"Duplicate gesture label '{entry.label}'")
            seen.add(entry.label)
        return self


def entries_to_model(entries: Sequence[GestureEntry]) -> LibraryFileModel:
    return LibraryFileModel(entries=[
        EntryModel(
            id=entry.id,
            label=entry.label,
            samples=[
                SampleModel(
                    id=sample.id,
                    normalized=list(sample.normalized),
                    curl_states=list(sample.curl_states),
                )
                for sample in entry.samples
            ],
        )
        for entry in entries
    ])


def model_to_entries(model: LibraryFileModel) -> List[GestureEntry]:
    return [
        GestureEntry(
            id=entry.id,
            label=entry.label,
            samples=tuple(
                GestureSample(
                    id=sample.id,
                    normalized=tuple(tuple(p) for p in sample.normalized),
                    curl_states=tuple(sample.curl_states),
                )
                for sample in entry.samples
            ),
        )
        for entry in model.entries
    ]


class JsonLibraryFile:
    """Persistence collaborator writing full library snapshots to a JSON file."""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize the library file.

        Args:
            path: File location; '~' is expanded
        """
        self.path = Path(path).expanduser()
        self.save_count = 0

    def load(self) -> List[GestureEntry]:
        """
        Read the library from disk.

        Returns:
            Stored entries, or an empty list if the file is missing or unreadable
        """
        if not self.path.exists():
            logger.info(f"No gesture library at {self.path}, starting empty")
            return []

        try:
            model = LibraryFileModel.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Could not read gesture library {self.path}: {e}")
            return []

        if model.key != STORAGE_KEY:
            logger.warning(f"Ignoring gesture library with unknown key '{model.key}'")
            return []

        entries = model_to_entries(model)
        logger.info(f"Loaded {len(entries)} gestures from {self.path}")
        return entries

    def save(self, entries: Sequence[GestureEntry]) -> None:
        """Write the complete library, replacing the previous file atomically."""
        payload = entries_to_model(entries).model_dump_json(indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".library-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

        self.save_count += 1
        logger.debug(f"Saved {len(entries)} gestures to {self.path}")
