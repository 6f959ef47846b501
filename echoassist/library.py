"""
In-memory gesture library, the single owner of all captured samples.
"""
import logging
import uuid
from dataclasses import replace
from typing import Iterable, List, Optional

from .types import GestureEntry, GestureSample, LibrarySinkProto, PoseDescriptor

logger = logging.getLogger(__name__)


def normalize_label(label: str) -> str:
    """Upper-case and trim a label so it can be used as a lookup key."""
    return label.strip().upper()


def new_id() -> str:
    return uuid.uuid4().hex


class GestureLibrary:
    """
    Ordered collection of gesture entries keyed by normalized label.

    Every mutation hands the complete contents to the optional sink.
    """

    def __init__(self, entries: Iterable[GestureEntry] = (), sink: Optional[LibrarySinkProto] = None):
        """
        Initialize the library.

        Args:
            entries: Entries restored from persistence
            sink: Persistence collaborator notified after every mutation
        """
        self._entries: List[GestureEntry] = list(entries)
        self.sink = sink

    @property
    def entries(self) -> List[GestureEntry]:
        """Snapshot of the current entries in insertion order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def find(self, label: str) -> Optional[GestureEntry]:
        """Look up an entry by label, ignoring case and surrounding whitespace."""
        key = normalize_label(label)
        for entry in self._entries:
            if entry.label == key:
                return entry
        return None

    def match_transcript(self, text: str) -> Optional[GestureEntry]:
        """
        Find the entry named by a spoken transcript.

        Words are checked from the last one backwards so the most recently
        spoken word wins.

        Args:
            text: Free-form transcript

        Returns:
            Matching entry, or None if no word names a gesture
        """
        words = text.upper().split()
        for word in reversed(words):
            entry = self.find(word)
            if entry is not None:
                return entry
        return None

    def add_sample(self, label: str, pose: PoseDescriptor) -> GestureEntry:
        """
        Store a pose under a label, merging into an existing entry.

        Args:
            label: Gesture label; normalized before lookup
            pose: Pose descriptor to snapshot

        Returns:
            The created or extended entry
        """
        key = normalize_label(label)
        if not key:
            raise ValueError("Gesture label must not be empty")

        sample = GestureSample(
            id=new_id(),
            normalized=pose.normalized,
            curl_states=pose.curl_states,
        )

        for i, entry in enumerate(self._entries):
            if entry.label == key:
                updated = replace(entry, samples=entry.samples + (sample,))
                self._entries[i] = updated
                logger.info(f"Added sample #{len(updated.samples)} to '{key}'")
                break
        else:
            updated = GestureEntry(id=new_id(), label=key, samples=(sample,))
            self._entries.append(updated)
            logger.info(f"Created gesture '{key}'")

        self._notify()
        return updated

    def remove(self, entry_id: str) -> bool:
        """
        Delete one entry and all its samples.

        Returns:
            True if an entry was removed
        """
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[i]
                logger.info(f"Removed gesture '{entry.label}'")
                self._notify()
                return True
        return False

    def clear(self) -> None:
        """Delete every entry."""
        self._entries.clear()
        logger.info("Cleared gesture library")
        self._notify()

    def _notify(self) -> None:
        if self.sink is not None:
            self.sink.save(self.entries)
