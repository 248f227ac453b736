import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from constellation.core.common.enums import ScanPhase
from constellation.core.concurrency.bounded_runner import RunCancelledError

from ..data.exclusion_rules import ExclusionRules
from ..data.local_fs import LocalFileSystem
from ..domain.errors import InvalidRootError, ScanCancelledError
from ..domain.interfaces import IFileSystem
from ..domain.models import ScanConfiguration, ScanResult
from .aggregator import aggregate
from .context import ScanContext, default_exclusions
from .progress import ProgressCallback, ProgressReporter
from .walker import TreeWalker

logger = logging.getLogger(__name__)


class FolderScanService:
    """
    Facade for the Folder Scan Feature.
    Orchestrates root validation, the tree walk, aggregation and progress reporting.
    """

    def __init__(self,
                 fs: Optional[IFileSystem] = None,
                 exclusions: Optional[Callable[[ScanConfiguration], ExclusionRules]] = None):
        self.fs = fs or LocalFileSystem()
        self.exclusions = exclusions or default_exclusions

    async def scan(self,
                   config: ScanConfiguration,
                   on_progress: Optional[ProgressCallback] = None,
                   is_cancelled: Optional[Callable[[], bool]] = None) -> ScanResult:
        """
        Scans `config.root_path` and returns a complete, internally consistent result.

        Raises:
            InvalidRootError: the root is missing or not a directory.
            FileLimitExceededError: per-file results were requested and the cap was hit.
            ScanCancelledError: `is_cancelled` returned True before the walk finished.
        """
        started = time.monotonic()
        progress = ProgressReporter(config.scan_id, on_progress)
        context = ScanContext(config, progress, is_cancelled, self.exclusions(config))

        logger.info(f"Starting scan {config.scan_id} of: {config.root_path} (max depth: {config.max_depth or 'unlimited'})")

        try:
            # 1. Validate root
            if not await self.fs.is_dir(config.root_path):
                raise InvalidRootError(config.root_path)

            if context.is_cancelled():
                raise RunCancelledError()

            # 2. Build the owned tree
            root_node = await TreeWalker(self.fs, context).walk(config.root_path)

            # 3. Project it into the flat arena
            progress.set_phase(ScanPhase.SUMMING)
            folders = aggregate(root_node)
        except RunCancelledError:
            if context.failure is not None:
                # A sibling descent stopped because another one failed.
                self._fail(config, progress, context.failure)
                raise context.failure from None
            progress.finish(ScanPhase.CANCELLED)
            logger.info(f"Scan {config.scan_id} cancelled after {progress.scanned_files} files.")
            raise ScanCancelledError(config.scan_id) from None
        except Exception as e:
            self._fail(config, progress, e)
            raise

        root_stats = folders[-1]
        result = ScanResult(
            scan_id=config.scan_id,
            root_path=config.root_path,
            generated_at=datetime.now(timezone.utc),
            folders=tuple(folders),
            total_size=root_stats.total_size,
            total_file_count=root_stats.file_count,
            files=tuple(context.files) if context.files is not None else None,
            elapsed_seconds=time.monotonic() - started,
        )
        progress.finish(ScanPhase.DONE)

        logger.info(
            f"Scan {config.scan_id} complete. {result.total_file_count} files, "
            f"{len(result.folders)} folders, {result.total_size} bytes in {result.elapsed_seconds:.2f}s"
        )
        return result

    @staticmethod
    def _fail(config: ScanConfiguration, progress: ProgressReporter, error: Exception) -> None:
        progress.finish(ScanPhase.DONE)
        logger.error(f"Scan {config.scan_id} failed: {error}")


# Singleton Instance for easy import
scanner = FolderScanService()


async def scan_directory(config: ScanConfiguration,
                         on_progress: Optional[ProgressCallback] = None,
                         is_cancelled: Optional[Callable[[], bool]] = None) -> ScanResult:
    return await scanner.scan(config, on_progress, is_cancelled)


def scan_directory_sync(config: ScanConfiguration,
                        on_progress: Optional[ProgressCallback] = None,
                        is_cancelled: Optional[Callable[[], bool]] = None) -> ScanResult:
    """Blocking wrapper for callers that are not running an event loop."""
    return asyncio.run(scan_directory(config, on_progress, is_cancelled))
