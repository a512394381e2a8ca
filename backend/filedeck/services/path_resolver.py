"""Confine client-supplied paths to the storage root."""

from __future__ import annotations

import os

from filedeck.errors import InvalidPath

_SEPARATORS = ("/", "\\")


class PathResolver:
    """Maps client paths (relative to root) onto absolute filesystem paths.

    Normalization is purely lexical: ``.`` and ``..`` segments and redundant
    separators are collapsed, symlinks are not followed. A resolved path is
    accepted only if it is the root itself or lies below it.
    """

    def __init__(self, root: str | os.PathLike):
        self._root = os.path.normpath(os.path.abspath(os.fspath(root)))

    @property
    def root(self) -> str:
        return self._root

    def resolve(self, client_path: str | None) -> str:
        """Return the absolute path for ``client_path`` or raise InvalidPath."""
        client_path = client_path or ""
        if "\x00" in client_path:
            raise InvalidPath("Invalid path")

        # Browsers send "/docs" and "docs" interchangeably; both mean root-relative
        relative = client_path.replace("\\", "/").lstrip("/")
        if os.sep != "/":
            relative = relative.replace("/", os.sep)

        candidate = os.path.normpath(os.path.join(self._root, relative))
        if not self.contains(candidate):
            raise InvalidPath("Invalid path")
        return candidate

    def contains(self, absolute: str) -> bool:
        if absolute == self._root:
            return True
        prefix = self._root if self._root.endswith(os.sep) else self._root + os.sep
        return absolute.startswith(prefix)

    def is_root(self, absolute: str) -> bool:
        return os.path.normpath(absolute) == self._root

    def relative(self, absolute: str) -> str:
        """Root-relative form of ``absolute`` with ``/`` separators ("" for root)."""
        if self.is_root(absolute):
            return ""
        return os.path.relpath(absolute, self._root).replace(os.sep, "/")

    def join(self, folder: str | None, name: str) -> str:
        """Resolve ``name`` as a direct child of the client folder ``folder``."""
        validate_name(name)
        folder = (folder or "").replace("\\", "/").rstrip("/")
        return self.resolve(f"{folder}/{name}" if folder else name)


def validate_name(name: str | None) -> str:
    """Check that ``name`` is a single path component."""
    if not name or name in (".", ".."):
        raise InvalidPath("Name required")
    if "\x00" in name or any(sep in name for sep in _SEPARATORS):
        raise InvalidPath(f"Invalid name: {name!r}")
    return name
