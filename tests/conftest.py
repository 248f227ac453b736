# File: tests/conftest.py

import os
import sys
import logging
from pathlib import Path
from typing import Dict, Union

import pytest

# 1. Add project root to path
sys.path.append(os.getcwd())

from constellation.features.folder_scan.data.local_fs import LocalFileSystem

TreeSpec = Dict[str, Union[int, "TreeSpec"]]


def build_tree(root: Path, spec: TreeSpec) -> Path:
    """
    Materialises a nested dict as files and folders.
    Integers are file sizes in bytes, dicts are sub-folders.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, value in spec.items():
        target = root / name
        if isinstance(value, dict):
            build_tree(target, value)
        else:
            target.write_bytes(b"x" * value)
    return root


class FlakyFileSystem(LocalFileSystem):
    """
    Local filesystem with injectable failures, independent of the OS user's permissions.
    """

    def __init__(self, unreadable_dirs=(), unreadable_files=()):
        self.unreadable_dirs = {str(p) for p in unreadable_dirs}
        self.unreadable_files = {str(p) for p in unreadable_files}
        self.list_calls = 0

    async def list_dir(self, path):
        self.list_calls += 1
        if path in self.unreadable_dirs:
            raise PermissionError(13, "Permission denied", path)
        return await super().list_dir(path)

    async def stat(self, path):
        if path in self.unreadable_files:
            return None
        return await super().stat(path)


@pytest.fixture(scope="session", autouse=True)
def quiet_logs():
    """Keeps per-entry DEBUG chatter out of the test output."""
    logging.getLogger("constellation").setLevel(logging.INFO)
    yield


@pytest.fixture
def sample_tree(tmp_path):
    """
    root/
      a.txt (100)        movie.mp4 (1000)
      docs/  report.pdf (200), notes.md (50)
        deep/  main.py (30)
          deeper/  archive.zip (400)
      photos/  cat.jpg (300)
      empty/
    """
    return build_tree(tmp_path / "root", {
        "a.txt": 100,
        "movie.mp4": 1000,
        "docs": {
            "report.pdf": 200,
            "notes.md": 50,
            "deep": {
                "main.py": 30,
                "deeper": {"archive.zip": 400},
            },
        },
        "photos": {"cat.jpg": 300},
        "empty": {},
    })


@pytest.fixture
def make_tree():
    return build_tree


@pytest.fixture
def flaky_fs_cls():
    return FlakyFileSystem
