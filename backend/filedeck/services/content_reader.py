"""File preview: text files as strings, everything else as bytes + MIME."""

from __future__ import annotations

import os
from dataclasses import dataclass

from filedeck.errors import InvalidTarget, IOFailure, NotFound
from filedeck.services.path_resolver import PathResolver

TEXT = "text"
BINARY = "binary"

TEXT_EXTENSIONS = frozenset({
    ".txt", ".json", ".js", ".ts", ".jsx", ".tsx",
    ".css", ".html", ".md", ".xml", ".csv", ".log",
})

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".mp4": "video/mp4",
    ".mp3": "audio/mpeg",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass
class FileContent:
    kind: str  # text, binary
    content: str | bytes
    name: str
    size: int
    mime_type: str | None = None


def mime_type_for(name: str) -> str:
    return MIME_TYPES.get(os.path.splitext(name)[1].lower(), DEFAULT_MIME_TYPE)


def is_text_file(name: str) -> bool:
    return os.path.splitext(name)[1].lower() in TEXT_EXTENSIONS


class ContentReader:
    def __init__(self, resolver: PathResolver):
        self._resolver = resolver

    def read(self, path: str | None) -> FileContent:
        target = self._resolver.resolve(path)
        if os.path.isdir(target):
            raise InvalidTarget("Cannot read directory")

        name = os.path.basename(target)
        try:
            with open(target, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            raise NotFound("File not found")
        except OSError as e:
            raise IOFailure(f"Failed to read file: {e.strerror or e}")

        if is_text_file(name):
            return FileContent(
                kind=TEXT,
                content=data.decode("utf-8", errors="replace"),
                name=name,
                size=len(data),
            )
        return FileContent(
            kind=BINARY,
            content=data,
            name=name,
            size=len(data),
            mime_type=mime_type_for(name),
        )
