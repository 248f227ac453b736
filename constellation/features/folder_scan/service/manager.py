import logging
import threading
from typing import Dict, List, Optional

from ..domain.models import ScanConfiguration, ScanResult
from .api import FolderScanService, scanner
from .progress import ProgressCallback

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Scan-scoped flag. Safe to flip from any thread (e.g. a UI or signal handler).
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()


class ScanManager:
    """
    Registry of running scans keyed by scan id.
    Lets an outside caller cancel a scan it only knows by id.
    """

    def __init__(self, service: Optional[FolderScanService] = None):
        self.service = service or scanner
        self._tokens: Dict[str, CancellationToken] = {}
        self._lock = threading.Lock()

    async def run(self, config: ScanConfiguration, on_progress: Optional[ProgressCallback] = None) -> ScanResult:
        token = self._register(config.scan_id)
        try:
            return await self.service.scan(config, on_progress, token.is_cancelled)
        finally:
            with self._lock:
                self._tokens.pop(config.scan_id, None)

    def cancel(self, scan_id: str) -> bool:
        """Requests cancellation. Returns False if no such scan is running."""
        with self._lock:
            token = self._tokens.get(scan_id)
        if token is None:
            logger.warning(f"Cancel requested for unknown scan {scan_id}")
            return False
        logger.info(f"Cancelling scan {scan_id}")
        token.cancel()
        return True

    def active_scans(self) -> List[str]:
        with self._lock:
            return list(self._tokens)

    def _register(self, scan_id: str) -> CancellationToken:
        with self._lock:
            if scan_id in self._tokens:
                raise ValueError(f"Scan {scan_id} is already running.")
            token = CancellationToken()
            self._tokens[scan_id] = token
            return token


# Singleton Instance for easy import
scan_manager = ScanManager()
