"""Session state: image sequence, cursor, keep/discard ledger and byte cache."""

import enum
import logging
import os
from typing import List, NamedTuple, Optional, Tuple

from errors import SessionFinished
from exporter import ExportResult, export_kept
from image_loader import WindowCache
from tree_scanner import DirectoryNode, build_sequence, project

logger = logging.getLogger(__name__)


class Verdict(enum.Enum):
    KEEP = "keep"
    DISCARD = "discard"


class Counts(NamedTuple):
    kept: int
    discarded: int
    remaining: int
    total: int


class DecisionLedger:
    """Append-only record of decisions, in processing order."""

    def __init__(self):
        self._kept: List[str] = []
        self._discarded: List[str] = []

    def record(self, path: str, verdict: Verdict):
        if verdict is Verdict.KEEP:
            self._kept.append(path)
        elif verdict is Verdict.DISCARD:
            self._discarded.append(path)
        else:
            raise ValueError(f"Unknown verdict: {verdict!r}")

    @property
    def kept(self) -> Tuple[str, ...]:
        return tuple(self._kept)

    @property
    def discarded(self) -> Tuple[str, ...]:
        return tuple(self._discarded)

    @property
    def kept_count(self) -> int:
        return len(self._kept)

    @property
    def discarded_count(self) -> int:
        return len(self._discarded)

    def __len__(self) -> int:
        return len(self._kept) + len(self._discarded)


class SiftSession:
    def __init__(self, working_root: str, tree: DirectoryNode, sequence: List[str], cache: Optional[WindowCache] = None):
        self.working_root = working_root
        self.tree = tree
        self.sequence = sequence
        self.cursor = 0
        self.ledger = DecisionLedger()
        self.cache = cache if cache is not None else WindowCache(sequence)
        self.cache.preload_initial()

    @classmethod
    def open(cls, root_path: str) -> "SiftSession":
        """Scan root_path and start a session over its images. Raises ScanError."""
        root_path = os.path.abspath(root_path)
        tree, sequence = build_sequence(root_path)
        return cls(root_path, tree, sequence)

    @property
    def total(self) -> int:
        return len(self.sequence)

    @property
    def is_finished(self) -> bool:
        return self.cursor >= len(self.sequence)

    @property
    def progress(self) -> float:
        if not self.sequence:
            return 1.0
        return self.cursor / len(self.sequence)

    def current_item(self) -> Optional[str]:
        if self.is_finished:
            return None
        return self.sequence[self.cursor]

    def advance(self, verdict: Verdict):
        """Record verdict for the current image and move to the next one."""
        path = self.current_item()
        if path is None:
            raise SessionFinished("No images left to decide")

        decided = self.cursor
        self.ledger.record(path, verdict)
        self.cache.discard(decided)
        self.cursor += 1
        self.cache.ensure_loaded(self.cursor)
        self.cache.evict(self.cursor)
        logger.debug("%s %s (%d/%d)", verdict.value, path, self.cursor, len(self.sequence))

    def counts(self) -> Counts:
        remaining = len(self.sequence) - self.cursor
        return Counts(
            kept=self.ledger.kept_count,
            discarded=self.ledger.discarded_count,
            remaining=remaining,
            total=len(self.sequence),
        )

    def cached_bytes(self, position: int) -> Optional[bytes]:
        return self.cache.get(position)

    def current_bytes(self) -> Optional[bytes]:
        """Bytes of the current image, read on demand when not cached yet."""
        if self.is_finished:
            return None
        return self.cache.load(self.cursor)

    def reset(self):
        """Forget every decision and start over from the first image."""
        self.sequence = project(self.tree, self.working_root)
        self.cursor = 0
        self.ledger = DecisionLedger()
        self.cache.clear()
        self.cache.paths = self.sequence
        self.cache.ensure_loaded(self.cursor)
        self.cache.evict(self.cursor)

    def export(self) -> ExportResult:
        return export_kept(self.ledger.kept, self.working_root)
