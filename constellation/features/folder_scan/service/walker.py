import logging
from typing import List, NamedTuple, Optional

from constellation.core.concurrency.bounded_runner import RunCancelledError, run_bounded

from ..data.file_types import is_hidden_name
from ..domain.interfaces import IFileSystem
from ..domain.models import DirEntry, FileStatus, FolderNode
from .context import ScanContext

logger = logging.getLogger(__name__)


class PendingLink(NamedTuple):
    """A followed directory link whose target is entered after the plain walk."""
    path: str
    real_path: str
    owner: FolderNode
    folding: bool


class TreeWalker:
    """
    Depth-first, cycle-safe directory walker.

    Builds the owned FolderNode tree down to the configured depth ceiling. Anything
    below the ceiling is summed into the last visible folder's direct statistics,
    so totals never depend on the depth limit.

    Followed directory links are entered in rounds once everything reachable
    without them has been claimed. Each round claims its targets in path order
    before any of them is listed, so the same link wins a shared target on every run.
    """

    def __init__(self, fs: IFileSystem, context: ScanContext):
        self.fs = fs
        self.ctx = context
        self._pending: List[PendingLink] = []

    async def walk(self, path: str, depth: int = 0) -> FolderNode:
        root = await self._descend(path, depth)

        while self._pending:
            batch = sorted(self._pending, key=lambda link: link.path)
            self._pending = []
            claimed = [link for link in batch if self._claim_link(link)]
            await run_bounded(claimed, self._enter_link, self.ctx.config.concurrency, self.ctx.should_stop)

        return root

    async def _descend(self, path: str, depth: int) -> FolderNode:
        node = FolderNode.for_path(path, depth)
        await self._scan_into(path, node, folding=False)
        return node

    async def _scan_into(self, path: str, owner: FolderNode, folding: bool, claimed: bool = False) -> None:
        """
        Lists `path` and books its entries into `owner`.
        For a visible folder `owner` is the folder itself; below the ceiling it is
        the nearest visible ancestor (`folding` is True).
        """
        # 1. Cycle / duplicate guard on the canonical path
        if not claimed:
            real_path = await self._io(self.fs.realpath, path)
            if not self.ctx.claim(real_path):
                logger.debug(f"Already visited {real_path}, skipping {path}")
                return

        self.ctx.progress.directory_scanned(path)

        # 2. Enumerate; an unreadable directory simply has no entries
        try:
            entries = await self._io(self.fs.list_dir, path)
        except OSError as e:
            logger.debug(f"Cannot list {path}: {e}")
            return

        children = await run_bounded(
            entries,
            lambda entry: self._visit(entry, owner, folding),
            self.ctx.config.concurrency,
            self.ctx.should_stop,
        )

        # 3. Attach children in listing order so the tree is deterministic
        if not folding:
            owner.children.extend(child for child in children if child is not None)

    async def _visit(self, entry: DirEntry, owner: FolderNode, folding: bool) -> Optional[FolderNode]:
        try:
            return await self._visit_entry(entry, owner, folding)
        except RunCancelledError:
            raise
        except Exception as e:
            # Sibling descents poll the context and stop scheduling.
            self.ctx.fail(e)
            raise

    async def _visit_entry(self, entry: DirEntry, owner: FolderNode, folding: bool) -> Optional[FolderNode]:
        config = self.ctx.config

        if not config.include_hidden and is_hidden_name(entry.name):
            return None

        if entry.is_symlink:
            if not config.follow_symlinks:
                return None
            target = await self._io(self.fs.realpath, entry.path)
            status = await self._io(self.fs.stat, target)
            if status is None:
                return None
            if status.is_dir:
                if self._is_excluded(entry.path) or self._is_excluded(target):
                    return None
                return self._defer_link(entry, target, owner, folding)
            if status.is_file:
                self.ctx.record_file(owner, entry.path, entry.name, status.size)
            return None

        if entry.is_dir:
            if self._is_excluded(entry.path):
                return None
            return await self._visit_directory(entry, owner, folding)

        if entry.is_file:
            await self._visit_file(entry, owner)
        return None

    async def _visit_directory(self, entry: DirEntry, owner: FolderNode, folding: bool) -> Optional[FolderNode]:
        child_depth = owner.depth + 1
        if not folding and self.ctx.config.within_depth(child_depth):
            return await self._descend(entry.path, child_depth)

        # Past the ceiling: fold the whole subtree into the visible owner.
        await self._scan_into(entry.path, owner, folding=True)
        return None

    async def _visit_file(self, entry: DirEntry, owner: FolderNode) -> None:
        status: Optional[FileStatus] = await self._io(self.fs.stat, entry.path)
        if status is None:
            logger.debug(f"Cannot stat {entry.path}, skipping")
            return
        self.ctx.record_file(owner, entry.path, entry.name, status.size)

    def _defer_link(self, entry: DirEntry, target: str, owner: FolderNode, folding: bool) -> Optional[FolderNode]:
        child_depth = owner.depth + 1
        if not folding and self.ctx.config.within_depth(child_depth):
            # The node takes its listing slot now and is filled in a later round.
            node = FolderNode.for_path(entry.path, child_depth)
            self._pending.append(PendingLink(entry.path, target, node, False))
            return node

        self._pending.append(PendingLink(entry.path, target, owner, True))
        return None

    def _claim_link(self, link: PendingLink) -> bool:
        if self.ctx.claim(link.real_path):
            return True
        logger.debug(f"Already visited {link.real_path}, skipping {link.path}")
        return False

    async def _enter_link(self, link: PendingLink) -> None:
        try:
            await self._scan_into(link.path, link.owner, link.folding, claimed=True)
        except RunCancelledError:
            raise
        except Exception as e:
            self.ctx.fail(e)
            raise

    def _is_excluded(self, path: str) -> bool:
        if self.ctx.exclusions.is_excluded(path):
            logger.debug(f"Excluded system directory {path}")
            return True
        return False

    async def _io(self, call, *args):
        async with self.ctx.io_slots:
            return await call(*args)
