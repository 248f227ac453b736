import asyncio
import os
import stat as stat_module
from typing import List, Optional

from ..domain.interfaces import IFileSystem
from ..domain.models import DirEntry, FileStatus


class LocalFileSystem(IFileSystem):
    """
    Concrete implementation over the os module.
    Every blocking call is pushed to a worker thread so the event loop keeps scheduling.
    """

    async def list_dir(self, path: str) -> List[DirEntry]:
        return await asyncio.to_thread(self._list_dir_blocking, path)

    async def realpath(self, path: str) -> str:
        try:
            return await asyncio.to_thread(os.path.realpath, path)
        except (OSError, ValueError):
            return path

    async def stat(self, path: str) -> Optional[FileStatus]:
        try:
            st = await asyncio.to_thread(os.stat, path)
        except (OSError, ValueError):
            return None
        return FileStatus(
            size=st.st_size,
            is_dir=stat_module.S_ISDIR(st.st_mode),
            is_file=stat_module.S_ISREG(st.st_mode),
        )

    async def is_dir(self, path: str) -> bool:
        status = await self.stat(path)
        return status is not None and status.is_dir

    @staticmethod
    def _list_dir_blocking(path: str) -> List[DirEntry]:
        entries = []
        with os.scandir(path) as it:
            for entry in it:
                # Entry typing can fail on its own (e.g. a vanished file); treat it as neither.
                try:
                    is_symlink = entry.is_symlink()
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = entry.is_file(follow_symlinks=False)
                except OSError:
                    is_symlink = is_dir = is_file = False
                entries.append(DirEntry(
                    name=entry.name,
                    path=entry.path,
                    is_dir=is_dir,
                    is_file=is_file,
                    is_symlink=is_symlink,
                ))
        return entries
