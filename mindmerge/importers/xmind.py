"""
XMind source importer for Mindmerge.

This module scans a source directory for workbook files and loads each one
into a SourceDocument: the raw content.json text plus the archive it came
from, so resources can be staged later.
"""

import logging
import zipfile
import zlib
from pathlib import Path
from typing import List

from ..errors import FatalMergeError, SourceReadError
from .archive import CONTENT_FILE, SourceArchive, SourceDocument
from .base import BaseImporter


class XMindImporter(BaseImporter):
    """
    Importer for a directory of .xmind workbooks.
    """

    def __init__(self, src_dir: str, suffix: str = ".xmind"):
        """
        Initialize the importer.

        Args:
            src_dir: Directory holding the workbooks to merge
            suffix: File name suffix that marks a workbook
        """
        self.src_dir = Path(src_dir)
        self.suffix = suffix
        logging.info(f"Initialized XMind importer for: {self.src_dir}")

    def list_sources(self) -> List[str]:
        """
        Return the workbook file names in the source directory, sorted.

        Raises:
            FatalMergeError: If the directory cannot be read or holds no workbooks
        """
        try:
            filenames = [entry.name for entry in self.src_dir.iterdir()]
        except OSError as e:
            raise FatalMergeError(str(e)) from e

        sources = sorted(name for name in filenames if name.endswith(self.suffix))
        if not sources:
            raise FatalMergeError(f"No {self.suffix} files found")

        logging.debug(f"Source files: {sources}")
        return sources

    def load(self, name: str) -> SourceDocument:
        """
        Read a workbook and extract its content.json text.

        Raises:
            SourceReadError: If the file, the archive or the content entry is unreadable
        """
        try:
            data = (self.src_dir / name).read_bytes()
        except OSError as e:
            raise SourceReadError(name, f"Error reading '{name}': {e}") from e

        try:
            archive = SourceArchive(data)
        except (zipfile.BadZipFile, ValueError, EOFError) as e:
            raise SourceReadError(name, f"Error reading '{name}' as zip: {e}") from e

        if not archive.has_entry(CONTENT_FILE):
            raise SourceReadError(name, f"Content file not found in '{name}', skipping")

        try:
            content_json = archive.read_text(CONTENT_FILE)
        except (zipfile.BadZipFile, zlib.error, UnicodeDecodeError, OSError,
                NotImplementedError, RuntimeError) as e:
            # NotImplementedError: unsupported compression; RuntimeError: encrypted entry
            raise SourceReadError(name, f"Error parsing '{name}' content file: {e}") from e

        logging.debug(f"Loaded {CONTENT_FILE} from {name} ({len(content_json)} chars)")
        return SourceDocument(label=name, content_json=content_json, archive=archive)
