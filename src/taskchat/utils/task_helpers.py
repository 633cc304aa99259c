"""Helpers for tags and document paths."""

from __future__ import annotations

import re
from collections.abc import Iterable

NOTE_EXTENSION = ".md"
# Letters, digits, "_", "-" and "/" for nested tags.
TAG_PATTERN = re.compile(r"[\w/-]+")


def normalize_tag(tag: str) -> str:
    """Strip whitespace and any leading '#' characters from a tag."""
    return tag.strip().lstrip("#")


def is_valid_tag(tag: str) -> bool:
    return bool(TAG_PATTERN.fullmatch(normalize_tag(tag)))


def unique_tags(tags: Iterable[str] | None) -> tuple[str, ...]:
    """Deduplicate tags while keeping their first-seen order.

    Empty entries are dropped; the tags themselves are kept as written.
    """
    if not tags:
        return ()
    if isinstance(tags, str):
        tags = [tags]
    result: dict[str, None] = {}
    for tag in tags:
        if isinstance(tag, str) and normalize_tag(tag):
            result.setdefault(tag.strip(), None)
    return tuple(result)


def has_tag(tags: Iterable[str], tag: str) -> bool:
    """Case-sensitive tag membership after '#'-stripping."""
    wanted = normalize_tag(tag)
    return any(normalize_tag(t) == wanted for t in tags)


def normalize_folder(folder: str) -> str:
    return folder.strip().strip("/")


def folder_of(path: str) -> str:
    """Return the part of *path* before the last '/', or '' at the root."""
    idx = path.rfind("/")
    return path[:idx] if idx >= 0 else ""


def strip_note_extension(path: str) -> str:
    if path.lower().endswith(NOTE_EXTENSION):
        return path[: -len(NOTE_EXTENSION)]
    return path


def note_name(path: str) -> str:
    """File name of a note without folder or extension."""
    return strip_note_extension(path.rsplit("/", 1)[-1])


def path_in_folder(path: str, folder: str) -> bool:
    """Path-prefix match on whole path segments."""
    folder = normalize_folder(folder)
    if not folder:
        return True
    return path == folder or path.startswith(folder + "/")


def path_is_note(path: str, note: str) -> bool:
    """Match a document path against a note reference.

    A reference containing '/' must match the full path; a bare name matches
    the file name. The '.md' extension is optional on both sides.
    """
    note = strip_note_extension(note.strip().strip("/"))
    if not note:
        return False
    if "/" in note:
        return strip_note_extension(path) == note
    return note_name(path) == note
