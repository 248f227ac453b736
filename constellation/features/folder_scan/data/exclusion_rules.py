import ntpath
import sys
from typing import FrozenSet, Optional


class ExclusionRules:
    """
    Central logic for which directories the walker must never enter.

    Only platforms with a known reserved-path layout (Windows) have rules; everywhere
    else, and whenever system directories were explicitly requested, nothing is excluded.
    A root chosen inside a reserved location is scanned in full.
    """

    # Anchored at the drive of the scan root.
    RESERVED_DIRS = (
        "Windows",
        "Program Files",
        "Program Files (x86)",
        "ProgramData",
        "$Recycle.Bin",
        "System Volume Information",
        "Recovery",
        "PerfLogs",
    )

    USER_CACHE_DIR = "AppData"

    def __init__(self,
                 root_path: str,
                 include_system_dirs: bool = False,
                 platform: Optional[str] = None,
                 anchor: Optional[str] = None):
        self.platform = platform or sys.platform
        self.active = not include_system_dirs and self.platform == "win32"
        self._reserved: FrozenSet[str] = frozenset()
        self._users_prefix = ""
        self._exempt_root: Optional[str] = None

        if self.active:
            if anchor is None:
                drive = ntpath.splitdrive(root_path)[0]
                anchor = drive + "\\" if drive else "\\"
            self._reserved = frozenset(self._fold(ntpath.join(anchor, d)) for d in self.RESERVED_DIRS)
            self._users_prefix = self._fold(ntpath.join(anchor, "Users")) + "\\"

            if self._matches(self._fold(root_path)):
                self._exempt_root = self._fold(root_path)

    @staticmethod
    def _fold(path: str) -> str:
        # normcase lowercases and turns '/' into '\' on Windows paths.
        return ntpath.normcase(ntpath.normpath(path))

    def is_excluded(self, path: str) -> bool:
        """
        Returns True if the directory (and everything below it) must be skipped.
        """
        if not self.active:
            return False

        candidate = self._fold(path)
        if self._exempt_root is not None and self._is_within(candidate, self._exempt_root):
            return False
        return self._matches(candidate)

    @staticmethod
    def _is_within(candidate: str, parent: str) -> bool:
        return candidate == parent or candidate.startswith(parent.rstrip("\\") + "\\")

    def _matches(self, candidate: str) -> bool:
        # 1. Reserved system locations and anything beneath them
        for reserved in self._reserved:
            if self._is_within(candidate, reserved):
                return True

        # 2. <drive>\Users\<anyone>\AppData[\...]
        if candidate.startswith(self._users_prefix):
            parts = candidate[len(self._users_prefix):].split("\\")
            if len(parts) >= 2 and parts[1] == self.USER_CACHE_DIR.lower():
                return True

        return False
