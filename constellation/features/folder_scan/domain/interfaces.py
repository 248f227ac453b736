from abc import ABC, abstractmethod
from typing import List, Optional

from .models import DirEntry, FileStatus

class IFileSystem(ABC):
    """
    Contract for the filesystem calls the walker suspends on.
    Abstracts os.scandir / os.stat / os.path.realpath behind awaitables.
    """

    @abstractmethod
    async def list_dir(self, path: str) -> List[DirEntry]:
        """
        Lists the immediate entries of a directory without following symlinks.
        Raises OSError if the directory cannot be read.
        """
        pass

    @abstractmethod
    async def realpath(self, path: str) -> str:
        """Canonical, symlink-free path. Falls back to `path` when it cannot be resolved."""
        pass

    @abstractmethod
    async def stat(self, path: str) -> Optional[FileStatus]:
        """Follows symlinks. Returns None if the entry vanished or cannot be read."""
        pass

    @abstractmethod
    async def is_dir(self, path: str) -> bool:
        """True if `path` exists and is (or links to) a directory."""
        pass
