# File: constellation/core/config/settings.py

import os


class Settings:
    # --- Scan Engine ---
    SCAN_CONCURRENCY: int = int(os.getenv("CONSTELLATION_SCAN_CONCURRENCY", "64"))
    MIN_SCAN_CONCURRENCY: int = 1
    MAX_SCAN_CONCURRENCY: int = 256

    # Advisory only: crossing it logs a warning, it never aborts a scan.
    SOFT_FILE_LIMIT: int = int(os.getenv("CONSTELLATION_SOFT_FILE_LIMIT", "1000000"))

    # Hard cap on per-file leaf records collected by a single scan.
    FILE_LEAF_CAP: int = int(os.getenv("CONSTELLATION_FILE_LEAF_CAP", "10000"))

    # --- Progress ---
    PROGRESS_INTERVAL_SECONDS: float = float(os.getenv("CONSTELLATION_PROGRESS_INTERVAL", "0.1"))

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("CONSTELLATION_LOG_LEVEL", "INFO").upper()

    def clamp_concurrency(self, value: int) -> int:
        """Pins a requested concurrency ceiling into the supported range."""
        return max(self.MIN_SCAN_CONCURRENCY, min(self.MAX_SCAN_CONCURRENCY, int(value)))


settings = Settings()
