import hashlib
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union
from uuid import uuid4

from constellation.core.common.enums import FileCategory, ScanPhase
from constellation.core.config.settings import settings


def path_id(path: str) -> str:
    """Stable 12-char identifier derived from an absolute path."""
    return hashlib.sha1(path.encode("utf-8", "surrogateescape")).hexdigest()[:12]


def display_name(path: str) -> str:
    return os.path.basename(path.rstrip("/\\")) or path


@dataclass(frozen=True)
class ScanConfiguration:
    """
    User intent to scan a directory subtree.
    Read-only for the whole duration of the scan.
    """
    root_path: Union[str, os.PathLike]
    max_depth: Optional[int] = None  # None / <= 0 means unlimited
    follow_symlinks: bool = False
    include_hidden: bool = False
    include_system_dirs: bool = False
    include_files: bool = False
    concurrency: int = settings.SCAN_CONCURRENCY
    soft_file_limit: int = settings.SOFT_FILE_LIMIT
    file_leaf_cap: int = settings.FILE_LEAF_CAP
    scan_id: str = ""

    def __post_init__(self):
        raw_root = os.fspath(self.root_path)
        if not raw_root.strip():
            raise ValueError("Scan root cannot be empty.")
        if self.file_leaf_cap < 0:
            raise ValueError(f"File leaf cap cannot be negative ({self.file_leaf_cap}).")

        object.__setattr__(self, "root_path", os.path.abspath(raw_root))
        if self.max_depth is not None and self.max_depth <= 0:
            object.__setattr__(self, "max_depth", None)
        object.__setattr__(self, "concurrency", settings.clamp_concurrency(self.concurrency))
        if not self.scan_id:
            object.__setattr__(self, "scan_id", uuid4().hex)

    def within_depth(self, depth: int) -> bool:
        return self.max_depth is None or depth <= self.max_depth


# --- Type Breakdown ---

@dataclass(frozen=True)
class TypeTotals:
    size: int = 0
    count: int = 0

    def __add__(self, other: "TypeTotals") -> "TypeTotals":
        return TypeTotals(size=self.size + other.size, count=self.count + other.count)

    def to_dict(self) -> Dict[str, int]:
        return {"size": self.size, "count": self.count}


class TypeBreakdown:
    """
    Fixed table with one TypeTotals slot per FileCategory.
    """
    __slots__ = ("_slots",)

    def __init__(self, entries: Optional[Mapping[FileCategory, TypeTotals]] = None):
        self._slots: Dict[FileCategory, TypeTotals] = {category: TypeTotals() for category in FileCategory}
        for category, totals in (entries or {}).items():
            self._slots[FileCategory(category)] = totals

    def add_file(self, category: FileCategory, size: int) -> None:
        self._slots[category] = self._slots[category] + TypeTotals(size=size, count=1)

    def merge(self, other: "TypeBreakdown") -> None:
        for category in FileCategory:
            self._slots[category] = self._slots[category] + other._slots[category]

    def copy(self) -> "TypeBreakdown":
        return TypeBreakdown(self._slots)

    def __getitem__(self, category: FileCategory) -> TypeTotals:
        return self._slots[FileCategory(category)]

    def __iter__(self) -> Iterator[FileCategory]:
        return iter(self._slots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeBreakdown):
            return NotImplemented
        return self._slots == other._slots

    def __repr__(self) -> str:
        return f"TypeBreakdown({self.to_dict()})"

    def items(self) -> List[Tuple[FileCategory, TypeTotals]]:
        """Only the categories that actually saw files."""
        return [(c, t) for c, t in self._slots.items() if t.count or t.size]

    @property
    def total_size(self) -> int:
        return sum(t.size for t in self._slots.values())

    @property
    def total_count(self) -> int:
        return sum(t.count for t in self._slots.values())

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {category.value: totals.to_dict() for category, totals in self.items()}


# --- Filesystem Views ---

@dataclass(frozen=True)
class DirEntry:
    """
    One directory listing entry, typed without following symlinks.
    """
    name: str
    path: str
    is_dir: bool = False
    is_file: bool = False
    is_symlink: bool = False


@dataclass(frozen=True)
class FileStatus:
    size: int
    is_dir: bool = False
    is_file: bool = False


# --- Tree Construction ---

@dataclass
class FolderNode:
    """
    Mutable node owned by the walker while the tree is being built.
    Never escapes the scan; the aggregator projects it into FolderStats.
    """
    id: str
    path: str
    name: str
    depth: int
    children: List["FolderNode"] = field(default_factory=list)
    direct_size: int = 0
    direct_file_count: int = 0
    direct_breakdown: TypeBreakdown = field(default_factory=TypeBreakdown)

    @classmethod
    def for_path(cls, path: str, depth: int) -> "FolderNode":
        return cls(id=path_id(path), path=path, name=display_name(path), depth=depth)

    def add_file(self, category: FileCategory, size: int) -> None:
        self.direct_size += size
        self.direct_file_count += 1
        self.direct_breakdown.add_file(category, size)


# --- Scan Output ---

@dataclass(frozen=True)
class FolderStats:
    id: str
    path: str
    name: str
    depth: int
    total_size: int
    file_count: int
    subfolder_count: int
    type_breakdown: TypeBreakdown
    children_ids: Tuple[str, ...]
    direct_size: int
    direct_file_count: int
    direct_type_breakdown: TypeBreakdown
    parent_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "name": self.name,
            "depth": self.depth,
            "parentId": self.parent_id,
            "totalSize": self.total_size,
            "fileCount": self.file_count,
            "subfolderCount": self.subfolder_count,
            "directSize": self.direct_size,
            "directFileCount": self.direct_file_count,
            "typeBreakdown": self.type_breakdown.to_dict(),
            "childrenIds": list(self.children_ids),
        }


@dataclass(frozen=True)
class FileStats:
    id: str
    path: str
    name: str
    parent_id: str
    depth: int
    size: int
    category: FileCategory

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "name": self.name,
            "parentId": self.parent_id,
            "depth": self.depth,
            "size": self.size,
            "type": self.category.value,
        }


@dataclass(frozen=True)
class ScanResult:
    """
    Report returned after a scan completes.
    Flat arena of folders: children are referenced by id, never owned.
    """
    scan_id: str
    root_path: str
    generated_at: datetime
    folders: Tuple[FolderStats, ...]
    total_size: int
    total_file_count: int
    files: Optional[Tuple[FileStats, ...]] = None
    elapsed_seconds: float = 0.0

    @property
    def root(self) -> FolderStats:
        return self.folder(path_id(self.root_path))

    def folder_map(self) -> Dict[str, FolderStats]:
        return {f.id: f for f in self.folders}

    def folder(self, folder_id: str) -> FolderStats:
        for stats in self.folders:
            if stats.id == folder_id:
                return stats
        raise KeyError(folder_id)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "scanId": self.scan_id,
            "rootPath": self.root_path,
            "generatedAt": self.generated_at.isoformat(),
            "folders": [f.to_dict() for f in self.folders],
            "totalSize": self.total_size,
            "totalFileCount": self.total_file_count,
            "elapsedMs": int(self.elapsed_seconds * 1000),
        }
        if self.files is not None:
            data["files"] = [f.to_dict() for f in self.files]
        return data


@dataclass(frozen=True)
class ScanProgress:
    """
    Transient snapshot; emitted zero or more times per scan, never persisted.
    """
    scan_id: str
    scanned_files: int
    scanned_dirs: int
    elapsed_seconds: float
    phase: ScanPhase
    current_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scanId": self.scan_id,
            "scannedFiles": self.scanned_files,
            "scannedDirs": self.scanned_dirs,
            "elapsedMs": int(self.elapsed_seconds * 1000),
            "currentPath": self.current_path,
            "phase": self.phase.value,
        }
