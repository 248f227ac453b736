# File: constellation/core/common/enums.py

from enum import Enum, unique

@unique
class FileCategory(str, Enum):
    VIDEO = "video"
    IMAGE = "image"
    AUDIO = "audio"
    DOCUMENT = "document"
    CODE = "code"
    ARCHIVE = "archive"
    OTHER = "other"

@unique
class ScanPhase(str, Enum):
    ENUMERATING = "enumerating"
    SUMMING = "summing"
    DONE = "done"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ScanPhase.DONE, ScanPhase.CANCELLED)
