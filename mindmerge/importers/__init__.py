"""Source importers and archive access."""

from .archive import SourceArchive, SourceDocument
from .base import BaseImporter
from .xmind import XMindImporter

__all__ = ["SourceArchive", "SourceDocument", "BaseImporter", "XMindImporter"]
