"""Mutating file operations confined to the storage root.

Every public method resolves all of its path arguments through the
PathResolver before touching the filesystem, so an invalid path never
produces a side effect.

There is no locking between requests. The existence checks in ``move`` and
the relocation that follows are separate steps: two concurrent moves onto the
same destination can both pass the check, and a delete racing a read turns
the read into NotFound.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass

from filedeck.errors import AlreadyExists, InvalidTarget, IOFailure, NotFound, WriteFailed
from filedeck.services.path_resolver import PathResolver, validate_name

logger = logging.getLogger(__name__)


@dataclass
class DownloadTarget:
    path: str
    filename: str
    size: int


class FileOperations:
    """upload, create_folder, delete, move, rename and download."""

    def __init__(self, resolver: PathResolver):
        self._resolver = resolver

    def upload(self, folder: str | None, filename: str, data: bytes) -> str:
        """Write ``data`` to ``folder/filename``, creating the folder if needed.

        Returns the root-relative path of the written file.
        """
        target_dir = self._resolver.resolve(folder)
        target = self._resolver.join(folder, filename)

        try:
            os.makedirs(target_dir, exist_ok=True)
        except OSError as e:
            logger.error("Upload: cannot create %s: %s", target_dir, e)
            raise WriteFailed(f"Failed to create folder: {e.strerror or e}")

        if os.path.isdir(target):
            raise InvalidTarget("A folder with that name already exists")

        try:
            with open(target, "wb") as f:
                f.write(data)
        except OSError as e:
            # The folder may have been created above; it is left in place
            logger.error("Upload: write to %s failed: %s", target, e)
            raise WriteFailed(f"Failed to write file: {e.strerror or e}")

        rel = self._resolver.relative(target)
        logger.info("Uploaded %s (%d bytes)", rel, len(data))
        return rel

    def create_folder(self, parent: str | None, name: str) -> str:
        """Create ``parent/name`` recursively. Existing folders are fine."""
        target = self._resolver.join(parent, name)
        try:
            os.makedirs(target, exist_ok=True)
        except FileExistsError:
            raise AlreadyExists("A file with that name already exists")
        except OSError as e:
            logger.error("Create folder %s failed: %s", target, e)
            raise WriteFailed(f"Failed to create folder: {e.strerror or e}")

        rel = self._resolver.relative(target)
        logger.info("Created folder %s", rel)
        return rel

    def delete(self, path: str | None) -> None:
        target = self._resolver.resolve(path)
        if self._resolver.is_root(target):
            raise InvalidTarget("Cannot delete the storage root")
        if not os.path.lexists(target):
            raise NotFound("File not found")

        try:
            if os.path.isdir(target) and not os.path.islink(target):
                shutil.rmtree(target)
            else:
                os.unlink(target)
        except FileNotFoundError:
            raise NotFound("File not found")
        except OSError as e:
            logger.error("Delete %s failed: %s", target, e)
            raise IOFailure(f"Failed to delete: {e.strerror or e}")

        logger.info("Deleted %s", self._resolver.relative(target))

    def move(self, source: str | None, destination: str | None) -> str:
        """Relocate ``source`` to ``destination``. Never overwrites."""
        src = self._resolver.resolve(source)
        dst = self._resolver.resolve(destination)

        if self._resolver.is_root(src):
            raise InvalidTarget("Cannot move the storage root")
        if not os.path.lexists(src):
            raise NotFound("Source file not found")
        if os.path.lexists(dst):
            raise AlreadyExists("Destination already exists")
        if dst.startswith(src + os.sep):
            raise InvalidTarget("Cannot move a folder into itself")

        dst_dir = os.path.dirname(dst)
        try:
            if not self._resolver.is_root(dst_dir):
                os.makedirs(dst_dir, exist_ok=True)
            os.rename(src, dst)
        except FileNotFoundError:
            raise NotFound("Source file not found")
        except OSError as e:
            logger.error("Move %s -> %s failed: %s", src, dst, e)
            raise IOFailure(f"Failed to move: {e.strerror or e}")

        rel = self._resolver.relative(dst)
        logger.info("Moved %s -> %s", self._resolver.relative(src), rel)
        return rel

    def rename(self, source: str | None, new_name: str) -> str:
        """Give ``source`` a new leaf name inside its current folder."""
        validate_name(new_name)
        src = self._resolver.resolve(source)
        if self._resolver.is_root(src):
            raise InvalidTarget("Cannot rename the storage root")
        parent = self._resolver.relative(os.path.dirname(src))
        destination = f"{parent}/{new_name}" if parent else new_name
        return self.move(source, destination)

    def download(self, path: str | None) -> DownloadTarget:
        target = self._resolver.resolve(path)
        try:
            st = os.stat(target)
        except FileNotFoundError:
            raise NotFound("File not found")
        except OSError as e:
            raise IOFailure(f"Failed to stat file: {e.strerror or e}")

        if os.path.isdir(target):
            raise InvalidTarget("Cannot download directory")
        return DownloadTarget(path=target, filename=os.path.basename(target), size=st.st_size)
