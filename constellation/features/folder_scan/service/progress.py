import logging
import time
from typing import Callable, Optional

from constellation.core.common.enums import ScanPhase
from constellation.core.config.settings import settings

from ..domain.models import ScanProgress

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanProgress], None]


class ProgressReporter:
    """
    Best-effort, throttled side channel carrying cumulative scan counters.

    - At most one emission per `interval` seconds while the scan runs.
    - Exactly one terminal emission (done / cancelled), regardless of throttling.
    - Nothing is emitted after the terminal event.
    """

    def __init__(self,
                 scan_id: str,
                 callback: Optional[ProgressCallback] = None,
                 interval: float = settings.PROGRESS_INTERVAL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.scan_id = scan_id
        self.callback = callback
        self.interval = interval
        self.clock = clock

        self.scanned_files = 0
        self.scanned_dirs = 0
        self.current_path: Optional[str] = None
        self.phase = ScanPhase.ENUMERATING

        self._started = clock()
        self._last_emit: Optional[float] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def file_scanned(self, path: str) -> None:
        self.scanned_files += 1
        self.current_path = path
        self._maybe_emit()

    def directory_scanned(self, path: str) -> None:
        self.scanned_dirs += 1
        self.current_path = path
        self._maybe_emit()

    def set_phase(self, phase: ScanPhase) -> None:
        if phase.is_terminal:
            raise ValueError(f"Terminal phase {phase.value} must be reported through finish().")
        self.phase = phase
        self._maybe_emit()

    def finish(self, phase: ScanPhase) -> None:
        """Emits the terminal event. Later calls are ignored."""
        if self._closed:
            return
        if not phase.is_terminal:
            raise ValueError(f"{phase.value} is not a terminal phase.")
        self.phase = phase
        self._emit()
        self._closed = True

    def snapshot(self) -> ScanProgress:
        return ScanProgress(
            scan_id=self.scan_id,
            scanned_files=self.scanned_files,
            scanned_dirs=self.scanned_dirs,
            elapsed_seconds=self.clock() - self._started,
            phase=self.phase,
            current_path=self.current_path,
        )

    def _maybe_emit(self) -> None:
        if self._closed or self.callback is None:
            return
        now = self.clock()
        if self._last_emit is not None and now - self._last_emit < self.interval:
            return
        self._emit()

    def _emit(self) -> None:
        if self.callback is None:
            return
        self._last_emit = self.clock()
        try:
            self.callback(self.snapshot())
        except Exception:
            # A broken listener must not take the scan down with it.
            logger.warning(f"Progress listener failed for scan {self.scan_id}", exc_info=True)
