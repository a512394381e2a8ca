"""Error taxonomy for filesystem operations.

Every error carries a ``kind`` (stable name shown to clients) and the HTTP
status the API layer maps it to.
"""

from __future__ import annotations


class FileDeckError(Exception):
    """Base class for all file operation failures."""

    kind = "Error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind}


class InvalidPath(FileDeckError):
    """Client path resolves outside the storage root, or is malformed."""

    kind = "InvalidPath"
    status_code = 400


class NotFound(FileDeckError):
    kind = "NotFound"
    status_code = 404


class AlreadyExists(FileDeckError):
    kind = "AlreadyExists"
    status_code = 409


class InvalidTarget(FileDeckError):
    """Operation attempted on the wrong kind of entry."""

    kind = "InvalidTarget"
    status_code = 400


class WriteFailed(FileDeckError):
    kind = "WriteFailed"
    status_code = 500


class IOFailure(FileDeckError):
    kind = "IOFailure"
    status_code = 500


class ProbeUnavailable(FileDeckError):
    """Disk probe failed or returned implausible data. Never sent to clients."""

    kind = "ProbeUnavailable"
    status_code = 503
