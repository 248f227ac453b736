import pytest

from constellation.core.common.enums import FileCategory
from constellation.features.folder_scan.data.file_types import FileTypes, classify, is_hidden_name


@pytest.mark.parametrize("name, expected", [
    ("holiday.MP4", FileCategory.VIDEO),
    ("cat.jpeg", FileCategory.IMAGE),
    ("song.flac", FileCategory.AUDIO),
    ("report.PDF", FileCategory.DOCUMENT),
    ("main.py", FileCategory.CODE),
    ("component.ts", FileCategory.CODE),
    ("backup.tar.gz", FileCategory.ARCHIVE),
    ("/abs/path/to/notes.md", FileCategory.DOCUMENT),
])
def test_known_extensions(name, expected):
    assert classify(name) == expected


@pytest.mark.parametrize("name", ["Makefile", "README", "weird.xyz", "trailingdot.", ""])
def test_unknown_or_missing_extension_is_other(name):
    assert classify(name) == FileCategory.OTHER


def test_every_extension_maps_to_a_single_category():
    seen = {}
    for category, extensions in FileTypes.EXTENSIONS.items():
        for ext in extensions:
            assert ext not in seen, f"{ext} listed under {seen.get(ext)} and {category}"
            seen[ext] = category


@pytest.mark.parametrize("name", [".git", ".DS_Store", "Thumbs.db", "DESKTOP.INI", "$RECYCLE.BIN", "ehthumbs.db"])
def test_hidden_names(name):
    assert is_hidden_name(name) is True


@pytest.mark.parametrize("name", ["visible.txt", "thumbs.db.bak", "", "folder"])
def test_visible_names(name):
    assert is_hidden_name(name) is False
