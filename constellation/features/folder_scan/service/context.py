import asyncio
import logging
from typing import Callable, List, Optional, Set

from ..data.exclusion_rules import ExclusionRules
from ..data.file_types import classify
from ..domain.errors import FileLimitExceededError
from ..domain.models import FileStats, FolderNode, ScanConfiguration, path_id
from .progress import ProgressReporter

logger = logging.getLogger(__name__)


class ScanContext:
    """
    Everything one scan mutates, threaded explicitly through the walker.
    Created at scan start and discarded at scan end; never shared between scans.

    All mutation happens on the event loop between suspension points, so the
    visited set and counters need no locks.
    """

    def __init__(self,
                 config: ScanConfiguration,
                 progress: ProgressReporter,
                 is_cancelled: Optional[Callable[[], bool]] = None,
                 exclusions: Optional[ExclusionRules] = None):
        self.config = config
        self.progress = progress
        self.exclusions = exclusions if exclusions is not None else default_exclusions(config)
        self.visited: Set[str] = set()
        self.files: Optional[List[FileStats]] = [] if config.include_files else None
        # Shared by every concurrent descent so they all draw from the same ceiling.
        self.io_slots = asyncio.Semaphore(config.concurrency)

        self._is_cancelled = is_cancelled
        self._cancel_observed = False
        self._failure: Optional[Exception] = None
        self._soft_limit_reported = False

    @property
    def cancel_observed(self) -> bool:
        return self._cancel_observed

    def is_cancelled(self) -> bool:
        """Polled before new work is scheduled. Latches once it has returned True."""
        if self._cancel_observed:
            return True
        if self._is_cancelled is not None and self._is_cancelled():
            self._cancel_observed = True
        return self._cancel_observed

    @property
    def failure(self) -> Optional[Exception]:
        return self._failure

    def fail(self, error: Exception) -> None:
        """Latches the first fatal error of the scan."""
        if self._failure is None:
            self._failure = error

    def should_stop(self) -> bool:
        """True once the scan failed or was cancelled; no new work may be scheduled."""
        return self._failure is not None or self.is_cancelled()

    def claim(self, real_path: str) -> bool:
        """Marks a canonical directory path as visited. False if it already was."""
        if real_path in self.visited:
            return False
        self.visited.add(real_path)
        return True

    def record_file(self, owner: FolderNode, path: str, name: str, size: int) -> None:
        """
        Books one file into `owner`'s direct statistics and, when requested,
        into the per-file leaf records.
        """
        category = classify(name)

        if self.files is not None:
            if len(self.files) >= self.config.file_leaf_cap:
                raise FileLimitExceededError(self.config.file_leaf_cap)
            self.files.append(FileStats(
                id=path_id(path),
                path=path,
                name=name,
                parent_id=owner.id,
                depth=owner.depth + 1,
                size=size,
                category=category,
            ))

        owner.add_file(category, size)
        self.progress.file_scanned(path)
        self._check_soft_limit()

    def _check_soft_limit(self) -> None:
        if self._soft_limit_reported or self.progress.scanned_files <= self.config.soft_file_limit:
            return
        self._soft_limit_reported = True
        logger.warning(
            f"Scan {self.config.scan_id} passed the soft file limit "
            f"({self.config.soft_file_limit}); continuing."
        )


def default_exclusions(config: ScanConfiguration) -> ExclusionRules:
    """Reserved-directory rules for the host platform."""
    return ExclusionRules(config.root_path, config.include_system_dirs)
