"""
Resource staging for Mindmerge.

Binary attachments (images, files) live under resources/ inside each source
archive. They are copied into a scratch directory by worker threads while the
topic trees are merged, then packed into the output archive.
"""

import logging
import shutil
import tempfile
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from ..importers.archive import RESOURCES_DIR, SourceArchive, is_unsafe_member_path


class ResourceStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


class ResourceCollector:
    """
    Stages archive resources into scratch files and tracks their status.

    Staging runs on a thread pool; wait() joins every submitted task before
    the output is packaged.
    """

    def __init__(self, scratch_dir: Optional[str] = None, max_workers: int = 4):
        """
        Initialize the collector.

        Args:
            scratch_dir: Parent directory for the scratch area (system temp if None)
            max_workers: Number of staging threads
        """
        self.scratch_dir = Path(tempfile.mkdtemp(prefix="mindmerge-", dir=scratch_dir))
        self.statuses: Dict[str, ResourceStatus] = {}
        self._errors: List[str] = []
        self._lock = threading.Lock()
        self._futures: List[Future] = []
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix="mindmerge-resource")
        logging.debug(f"Resource scratch directory: {self.scratch_dir}")

    def stage(self, archive: SourceArchive, source_label: str) -> int:
        """
        Start staging every resource in archive.

        Returns:
            Number of resources found in the archive
        """
        names = archive.entries(RESOURCES_DIR)
        for name in names:
            with self._lock:
                # First source to stage a name wins; only a failed copy is retried
                if self.statuses.get(name) in (ResourceStatus.PENDING, ResourceStatus.DONE):
                    logging.debug(f"Resource {name} from {source_label} already staged, skipping")
                    continue
                self.statuses[name] = ResourceStatus.PENDING
            self._futures.append(
                self._executor.submit(self._stage_one, archive, name, source_label)
            )
        return len(names)

    def _stage_one(self, archive: SourceArchive, name: str, source_label: str) -> None:
        try:
            if is_unsafe_member_path(name, self.scratch_dir):
                raise ValueError("unsafe resource path")
            target = self.scratch_dir / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(archive.read_bytes(RESOURCES_DIR + name))
        except Exception as e:
            message = f"Unable to stage resource '{name}' from '{source_label}': {e}"
            logging.warning(message)
            with self._lock:
                self.statuses[name] = ResourceStatus.FAILED
                self._errors.append(message)
            return

        with self._lock:
            self.statuses[name] = ResourceStatus.DONE
        logging.debug(f"Added {RESOURCES_DIR}{name} from {source_label}")

    def pending(self) -> List[str]:
        with self._lock:
            return [name for name, status in self.statuses.items()
                    if status == ResourceStatus.PENDING]

    def wait(self) -> List[str]:
        """
        Block until every submitted staging task has finished.

        Returns:
            One message per resource that could not be staged
        """
        if self._futures:
            wait(self._futures)
            self._futures = []
        with self._lock:
            errors, self._errors = self._errors, []
        return errors

    def staged(self) -> Iterator[Tuple[str, Path]]:
        """Yield (resource path, scratch file) for every staged resource."""
        with self._lock:
            done = sorted(name for name, status in self.statuses.items()
                          if status == ResourceStatus.DONE)
        for name in done:
            yield name, self.scratch_dir / name

    def discard(self, name: str) -> None:
        """Delete a staged resource's scratch file."""
        (self.scratch_dir / name).unlink(missing_ok=True)

    def close(self) -> None:
        """Stop the staging threads and remove the scratch directory."""
        self._executor.shutdown(wait=True)
        shutil.rmtree(self.scratch_dir, ignore_errors=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
