"""Incremental index builder.

Walks a directory tree and refreshes an index so that every regular file maps
to the SHA-1 of its content at its recorded modification time:

1. Start from the prior index; no path counts as seen yet
2. Walk the tree (explicit stack, name order within a directory)
   2a. Timestamp matches the recorded one: mark seen, no rehash
   2b. Timestamp differs or path is new: hash, store, mark seen
   2c. Modified within the settle interval: defer to the next run
3. Drop unseen entries (remove_missing) and entries older than the ignore
   threshold
4. Report whether anything changed; update_tree() persists only then

Any filesystem error aborts the run. Nothing is written until the walk is
complete, so a half-built index never reaches disk.
"""

import errno
import logging
import os
import stat
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional, Set, Tuple

from ..config import BuilderConfig
from ..errors import FilesystemError, ResourceNotFoundError
from .digest import file_digest
from .store import load_index, save_index
from .types import Index, IndexEntry, Timestamp

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Changelog event types (value is the stdout prefix)."""
    ADD = "add"
    MODIFY = "mod"
    REMOVE = "rem"
    EXPIRE = "exp"
    SKIP = "skip"


@dataclass(frozen=True)
class BuildEvent:
    kind: EventKind
    path: str
    reason: Optional[str] = None

    def describe(self) -> str:
        if self.kind is EventKind.SKIP:
            return f"Skipping {self.path} -- {self.reason}"
        return f"{self.kind.value} {self.path}"


class EntryKind(Enum):
    """Resolved type of a directory entry."""
    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"
    DANGLING = "dangling"


def classify_entry(entry: os.DirEntry, follow_symlinks: bool = True) -> EntryKind:
    """Resolve what a directory entry should be treated as.

    Symbolic links are classified by their target. A link whose target is
    missing or loops back on itself is DANGLING.

    Raises:
        OSError: If the entry or its link target cannot be inspected
    """
    if entry.is_symlink():
        if not follow_symlinks:
            return EntryKind.OTHER
        try:
            st = os.stat(entry.path)
        except FileNotFoundError:
            return EntryKind.DANGLING
        except OSError as e:
            if e.errno == errno.ELOOP:
                return EntryKind.DANGLING
            raise
        if stat.S_ISDIR(st.st_mode):
            return EntryKind.DIRECTORY
        if stat.S_ISREG(st.st_mode):
            return EntryKind.FILE
        return EntryKind.OTHER

    if entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    if entry.is_file(follow_symlinks=False):
        return EntryKind.FILE
    return EntryKind.OTHER


@dataclass
class BuildResult:
    """Outcome of one builder run."""
    index: Index
    changed: bool = False
    events: List[BuildEvent] = field(default_factory=list)
    files_seen: int = 0
    cache_hits: int = 0
    ignored: int = 0
    index_path: Optional[Path] = None
    prior_existed: bool = True
    written: bool = False

    def count(self, kind: EventKind) -> int:
        return sum(1 for event in self.events if event.kind is kind)


# (directory path, tree-relative prefix, depth, (dev, ino) of ancestors)
_PendingDir = Tuple[str, str, int, FrozenSet[Tuple[int, int]]]


class IndexBuilder:
    """Refresh an index against a directory tree.

    Args:
        config: Builder options
        clock: Returns "now" in nanoseconds since the epoch
        on_event: Called with each BuildEvent as it happens
    """

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        clock: Callable[[], int] = time.time_ns,
        on_event: Optional[Callable[[BuildEvent], None]] = None,
    ):
        self.config = config or BuilderConfig()
        self._clock = clock
        self._on_event = on_event

    def build(self, root: Path, prior: Optional[Index] = None) -> BuildResult:
        """Walk root and return the refreshed index.

        The prior index is not modified.

        Raises:
            FilesystemError: On any listing, stat or read failure
        """
        result = BuildResult(index=dict(prior or {}))
        seen: Set[str] = set()

        self._walk(Path(root), result, seen)
        self._apply_policy(result, seen)

        logger.info(
            f"Walked {result.files_seen} files: {result.cache_hits} unchanged, "
            f"{result.count(EventKind.ADD)} added, {result.count(EventKind.MODIFY)} modified, "
            f"{result.count(EventKind.SKIP)} skipped"
        )
        return result

    def _emit(self, result: BuildResult, kind: EventKind, path: str, reason: Optional[str] = None):
        event = BuildEvent(kind, path, reason)
        result.events.append(event)
        if kind is not EventKind.SKIP:
            result.changed = True
        logger.debug(event.describe())
        if self._on_event is not None:
            self._on_event(event)

    def _walk(self, root: Path, result: BuildResult, seen: Set[str]) -> None:
        try:
            root_stat = os.stat(root)
        except OSError as e:
            raise FilesystemError(root, e) from e

        stack: List[_PendingDir] = [
            (str(root), "", 0, frozenset({(root_stat.st_dev, root_stat.st_ino)}))
        ]
        while stack:
            directory, prefix, depth, ancestors = stack.pop()
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                raise FilesystemError(directory, e) from e

            subdirs: List[_PendingDir] = []
            for entry in entries:
                rel_path = prefix + entry.name
                # Never index the index file or its temporary sibling
                if rel_path.startswith(self.config.index_name):
                    continue
                key = "./" + rel_path

                try:
                    kind = classify_entry(entry, self.config.follow_symlinks)
                except OSError as e:
                    raise FilesystemError(entry.path, e) from e

                if kind is EntryKind.DIRECTORY:
                    pending = self._descend(result, entry, key, rel_path, depth, ancestors)
                    if pending is not None:
                        subdirs.append(pending)
                elif kind is EntryKind.FILE:
                    self._update_file(result, seen, Path(entry.path), key)
                elif kind is EntryKind.DANGLING:
                    self._emit(result, EventKind.SKIP, key, "dangling symbolic link")
                else:
                    self._emit(result, EventKind.SKIP, key, "not a regular file")

            # Reversed so directories pop in name order
            stack.extend(reversed(subdirs))

    def _descend(self, result, entry, key, rel_path, depth, ancestors) -> Optional[_PendingDir]:
        max_depth = self.config.max_depth
        if max_depth is not None and depth >= max_depth:
            self._emit(result, EventKind.SKIP, key, f"deeper than max depth {max_depth}")
            return None

        try:
            st = entry.stat(follow_symlinks=True)
        except OSError as e:
            raise FilesystemError(entry.path, e) from e

        ident = (st.st_dev, st.st_ino)
        if ident in ancestors:
            self._emit(result, EventKind.SKIP, key, "directory loop")
            return None
        return (entry.path, rel_path + "/", depth + 1, ancestors | {ident})

    def _update_file(self, result: BuildResult, seen: Set[str], file_path: Path, key: str) -> None:
        config = self.config
        try:
            st = os.stat(file_path)
        except OSError as e:
            raise FilesystemError(file_path, e) from e

        result.files_seen += 1
        modified = Timestamp.from_stat(st)
        age_ns = self._clock() - st.st_mtime_ns

        threshold = config.ignore_older_than_ns
        if threshold is not None and config.ignore_mode == "exclude" and age_ns > threshold:
            result.ignored += 1
            logger.debug(f"Ignoring {key}: older than {config.ignore_older_than_days} days")
            return

        existing = result.index.get(key)
        if existing is not None and existing.modified == modified:
            seen.add(key)
            result.cache_hits += 1
            return

        # Metadata of a file still being written may not have settled yet
        if 0 <= age_ns < config.settle_ns:
            self._emit(result, EventKind.SKIP, key, "modified too recently")
            return

        digest = file_digest(file_path, config.digest_backend, config.chunk_size)
        result.index[key] = IndexEntry(digest=digest, modified=modified)
        seen.add(key)
        self._emit(result, EventKind.ADD if existing is None else EventKind.MODIFY, key)

    def _apply_policy(self, result: BuildResult, seen: Set[str]) -> None:
        config = self.config
        threshold = config.ignore_older_than_ns
        if not config.remove_missing and threshold is None:
            return

        cutoff_ns = self._clock() - threshold if threshold is not None else None
        for path in sorted(result.index):
            entry = result.index[path]
            if config.remove_missing and path not in seen:
                del result.index[path]
                self._emit(result, EventKind.REMOVE, path)
            elif cutoff_ns is not None and entry.modified.to_ns() < cutoff_ns:
                if config.ignore_mode == "expire" and path in seen:
                    continue
                del result.index[path]
                self._emit(result, EventKind.EXPIRE, path)


def update_tree(
    root: Path,
    config: Optional[BuilderConfig] = None,
    clock: Callable[[], int] = time.time_ns,
    on_event: Optional[Callable[[BuildEvent], None]] = None,
    on_missing_index: Optional[Callable[[Path], None]] = None,
) -> BuildResult:
    """Load the index stored in root, refresh it and save it if changed.

    Args:
        root: Tree root; the index file lives directly inside it
        config: Builder options (index_name selects the file)
        clock: Returns "now" in nanoseconds since the epoch
        on_event: Called with each BuildEvent as it happens
        on_missing_index: Called with the index path before the walk when no
            index exists yet

    Returns:
        BuildResult with written=True when the index file was replaced

    Raises:
        FilesystemError: On any filesystem failure
        IndexFormatError: If the existing index is corrupt
    """
    config = config or BuilderConfig()
    root = Path(root)
    index_path = root / config.index_name

    try:
        prior = load_index(index_path)
        prior_existed = True
    except ResourceNotFoundError:
        prior = {}
        prior_existed = False
        if on_missing_index is not None:
            on_missing_index(index_path)

    builder = IndexBuilder(config, clock=clock, on_event=on_event)
    result = builder.build(root, prior)
    result.index_path = index_path
    result.prior_existed = prior_existed

    if result.changed:
        save_index(index_path, result.index)
        result.written = True
        logger.info(f"Saved {len(result.index)} entries to {index_path}")
    else:
        logger.info("Index unchanged, not writing")

    return result
