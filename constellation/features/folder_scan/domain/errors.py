class ScanError(Exception):
    """
    Base for every failure that aborts a scan.
    `code` is a stable tag callers can branch on without parsing the message.
    """

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class InvalidRootError(ScanError):
    def __init__(self, root_path: str) -> None:
        super().__init__(f"Root path is not a directory: {root_path}", code="invalid_root")
        self.root_path = root_path


class FileLimitExceededError(ScanError):
    def __init__(self, limit: int) -> None:
        super().__init__(
            f"Too many files (> {limit}). Please narrow the scope or disable per-file results.",
            code="file_limit_exceeded",
        )
        self.limit = limit


class ScanCancelledError(ScanError):
    """
    A normal outcome: the caller asked the scan to stop.
    UIs should present it as a quiet 'stopped' state, not an error.
    """

    def __init__(self, scan_id: str) -> None:
        super().__init__(f"Scan {scan_id} was cancelled.", code="cancelled")
        self.scan_id = scan_id
