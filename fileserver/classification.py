"""Extension based file classification."""

import os
from enum import Enum
from typing import Dict


class FileCategory(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    ARCHIVE = "archive"
    EXECUTABLE = "executable"
    CODE = "code"
    FONT = "font"
    DATABASE = "database"
    OTHER = "other"


CATEGORY_EXTENSIONS = {
    FileCategory.IMAGE: (
        ".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tiff", ".svg", ".ico", ".heic",
    ),
    FileCategory.VIDEO: (
        ".mp4", ".avi", ".mov", ".mkv", ".webm", ".flv", ".wmv", ".m4v", ".3gp", ".mpeg", ".mpg",
    ),
    FileCategory.AUDIO: (
        ".mp3", ".wav", ".ogg", ".aac", ".flac", ".m4a", ".wma", ".aiff",
    ),
    FileCategory.DOCUMENT: (
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".txt", ".rtf", ".csv",
        ".odt", ".ods",
    ),
    FileCategory.ARCHIVE: (
        ".zip", ".rar", ".7z", ".tar", ".gz", ".bz2", ".dmg", ".iso",
    ),
    # .dmg is listed under archives only
    FileCategory.EXECUTABLE: (
        ".exe", ".msi", ".pkg", ".deb", ".rpm", ".apk",
    ),
    FileCategory.CODE: (
        ".js", ".jsx", ".ts", ".tsx", ".html", ".css", ".scss", ".php", ".py", ".java",
        ".c", ".cpp", ".json", ".xml",
    ),
    FileCategory.FONT: (
        ".ttf", ".otf", ".woff", ".woff2", ".eot",
    ),
    FileCategory.DATABASE: (
        ".sql", ".db", ".sqlite", ".mdb",
    ),
}


def _build_extension_index() -> Dict[str, FileCategory]:
    index: Dict[str, FileCategory] = {}
    for category, extensions in CATEGORY_EXTENSIONS.items():
        for ext in extensions:
            if ext in index:
                raise ValueError(
                    f"Extension {ext} mapped to both {index[ext].value} and {category.value}"
                )
            index[ext] = category
    return index


EXTENSION_INDEX = _build_extension_index()

CATEGORY_ICONS = {
    FileCategory.IMAGE: "far fa-file-image text-green-500",
    FileCategory.VIDEO: "far fa-file-video text-red-500",
    FileCategory.AUDIO: "far fa-file-audio text-purple-500",
    FileCategory.DOCUMENT: "far fa-file-alt text-blue-400",
    FileCategory.ARCHIVE: "far fa-file-archive text-yellow-500",
    FileCategory.EXECUTABLE: "fas fa-cog text-gray-500",
    FileCategory.CODE: "far fa-file-code text-indigo-500",
    FileCategory.FONT: "fas fa-font text-pink-500",
    FileCategory.DATABASE: "fas fa-database text-teal-500",
    FileCategory.OTHER: "far fa-file text-gray-500",
}

DOCUMENT_ICONS = {
    ".pdf": "far fa-file-pdf text-red-500",
    ".doc": "far fa-file-word text-blue-500",
    ".docx": "far fa-file-word text-blue-500",
    ".xls": "far fa-file-excel text-green-600",
    ".xlsx": "far fa-file-excel text-green-600",
    ".ppt": "far fa-file-powerpoint text-orange-500",
    ".pptx": "far fa-file-powerpoint text-orange-500",
}


def get_extension(filename: str) -> str:
    """
    Return the lowercased extension of a filename, dot included.

    "photo.PNG" -> ".png", "archive.tar.gz" -> ".gz", "README" -> "",
    ".bashrc" -> "" (a leading dot alone does not start an extension).
    """
    return os.path.splitext(filename)[1].lower()


def classify(filename: str) -> FileCategory:
    """
    Map a filename to exactly one category from its extension.

    Content is never inspected; unknown or missing extensions are OTHER.
    """
    return EXTENSION_INDEX.get(get_extension(filename), FileCategory.OTHER)


def get_file_icon(filename: str, category: FileCategory) -> str:
    """Return the Font Awesome class shown next to a file in the gallery."""
    if category is FileCategory.DOCUMENT:
        return DOCUMENT_ICONS.get(get_extension(filename), CATEGORY_ICONS[category])
    return CATEGORY_ICONS[category]
