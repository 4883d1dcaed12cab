"""Tests for extension based classification."""

import pytest

from fileserver.classification import (
    CATEGORY_EXTENSIONS,
    FileCategory,
    classify,
    get_extension,
    get_file_icon,
)


@pytest.mark.parametrize("filename, expected", [
    ("a.png", FileCategory.IMAGE),
    ("a.mp4", FileCategory.VIDEO),
    ("a.mp3", FileCategory.AUDIO),
    ("a.pdf", FileCategory.DOCUMENT),
    ("a.zip", FileCategory.ARCHIVE),
    ("a.exe", FileCategory.EXECUTABLE),
    ("a.js", FileCategory.CODE),
    ("a.woff2", FileCategory.FONT),
    ("a.sqlite", FileCategory.DATABASE),
    ("a.xyz123", FileCategory.OTHER),
    ("README", FileCategory.OTHER),
])
def test_classify_examples(filename, expected):
    assert classify(filename) == expected


def test_every_table_extension_maps_to_its_category():
    for category, extensions in CATEGORY_EXTENSIONS.items():
        for ext in extensions:
            assert classify(f"file{ext}") == category


def test_categories_are_disjoint():
    seen = {}
    for category, extensions in CATEGORY_EXTENSIONS.items():
        for ext in extensions:
            assert ext not in seen, f"{ext} in {seen.get(ext)} and {category}"
            seen[ext] = category


def test_dmg_is_an_archive():
    assert classify("installer.dmg") == FileCategory.ARCHIVE


def test_classify_is_case_insensitive():
    assert classify("PHOTO.JPG") == FileCategory.IMAGE
    assert classify("1718000000000-abc-Report.PDF") == FileCategory.DOCUMENT


@pytest.mark.parametrize("filename, expected", [
    ("photo.PNG", ".png"),
    ("archive.tar.gz", ".gz"),
    ("README", ""),
    (".bashrc", ""),
])
def test_get_extension(filename, expected):
    assert get_extension(filename) == expected


def test_document_icons_follow_extension():
    assert "pdf" in get_file_icon("a.pdf", FileCategory.DOCUMENT)
    assert "word" in get_file_icon("a.docx", FileCategory.DOCUMENT)
    assert "excel" in get_file_icon("a.xlsx", FileCategory.DOCUMENT)
    assert "powerpoint" in get_file_icon("a.pptx", FileCategory.DOCUMENT)
    assert get_file_icon("a.txt", FileCategory.DOCUMENT) == "far fa-file-alt text-blue-400"


def test_every_category_has_an_icon():
    for category in FileCategory:
        assert get_file_icon("x", category)
