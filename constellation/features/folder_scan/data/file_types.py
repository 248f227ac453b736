import os
from typing import Dict, FrozenSet

from constellation.core.common.enums import FileCategory


class FileTypes:
    """
    Central logic for mapping file names to display categories.
    """

    EXTENSIONS: Dict[FileCategory, FrozenSet[str]] = {
        FileCategory.VIDEO: frozenset({
            "mp4", "mkv", "avi", "mov", "wmv", "flv", "webm", "m4v",
        }),
        FileCategory.IMAGE: frozenset({
            "jpg", "jpeg", "png", "gif", "bmp", "svg", "webp", "tif", "tiff",
            "heic", "heif", "ico", "raw", "cr2", "nef", "arw",
        }),
        FileCategory.AUDIO: frozenset({
            "mp3", "wav", "flac", "aac", "ogg", "m4a", "wma", "aiff", "alac", "opus",
        }),
        FileCategory.DOCUMENT: frozenset({
            "pdf", "doc", "docx", "ppt", "pptx", "xls", "xlsx", "csv", "md", "txt",
            "rtf", "odt", "ods", "odp", "epub",
        }),
        FileCategory.CODE: frozenset({
            "js", "ts", "tsx", "jsx", "mjs", "cjs", "json", "yml", "yaml", "xml", "html",
            "css", "scss", "less", "vue", "svelte", "py", "java", "kt", "c", "h",
            "cpp", "hpp", "cs", "go", "rb", "rs", "php", "sql", "swift", "r",
            "ipynb", "sh", "bat", "ps1", "toml", "ini", "gradle",
        }),
        FileCategory.ARCHIVE: frozenset({
            "zip", "rar", "7z", "tar", "gz", "bz2", "xz", "lz", "lz4", "zst",
            "iso", "dmg", "cab",
        }),
    }

    # Thumbnail caches, desktop metadata and recycle-bin markers.
    NOISE_NAMES: FrozenSet[str] = frozenset({
        "thumbs.db", "ehthumbs.db", "desktop.ini", "$recycle.bin", "icon\r",
    })

    HIDDEN_PREFIX = "."

    _LOOKUP: Dict[str, FileCategory] = {
        ext: category for category, extensions in EXTENSIONS.items() for ext in extensions
    }

    @classmethod
    def classify(cls, name: str) -> FileCategory:
        """
        Maps a file name (or path) to exactly one category by its lowercased extension.
        Names without a known extension fall back to OTHER.
        """
        ext = os.path.splitext(name)[1].lower().lstrip(".")
        if not ext:
            return FileCategory.OTHER
        return cls._LOOKUP.get(ext, FileCategory.OTHER)

    @classmethod
    def is_hidden_name(cls, name: str) -> bool:
        if not name:
            return False
        if name.startswith(cls.HIDDEN_PREFIX):
            return True
        return name.lower() in cls.NOISE_NAMES


classify = FileTypes.classify
is_hidden_name = FileTypes.is_hidden_name
