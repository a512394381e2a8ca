"""Business logic services: wired together once per application."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from filedeck.config import Settings
from filedeck.services.catalog import EntryCatalog
from filedeck.services.chat_log import ChatLog
from filedeck.services.content_reader import ContentReader
from filedeck.services.disk_probe import DiskProbe, default_probes
from filedeck.services.file_operations import FileOperations
from filedeck.services.path_resolver import PathResolver
from filedeck.services.usage import UsageReporter


@dataclass
class Services:
    resolver: PathResolver
    catalog: EntryCatalog
    files: FileOperations
    reader: ContentReader
    usage: UsageReporter
    chat: ChatLog


def build_services(settings: Settings, probes: Sequence[DiskProbe] | None = None) -> Services:
    """Create every service against the configured storage root."""
    root = Path(settings.storage_root)
    root.mkdir(parents=True, exist_ok=True)

    resolver = PathResolver(root)
    if probes is None:
        probes = default_probes(timeout=settings.probe_timeout_seconds)

    return Services(
        resolver=resolver,
        catalog=EntryCatalog(resolver),
        files=FileOperations(resolver),
        reader=ContentReader(resolver),
        usage=UsageReporter(resolver.root, probes),
        chat=ChatLog(settings.chat_file),
    )
