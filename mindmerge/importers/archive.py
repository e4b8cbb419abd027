"""
Zip archive access for mind-map workbooks.

A workbook is a zip file holding content.json plus an optional resources/
folder of attachments. SourceArchive keeps the raw bytes in memory and opens
a fresh ZipFile for every read, so staging threads never share a handle.
"""

import io
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List

CONTENT_FILE = "content.json"
MANIFEST_FILE = "manifest.json"
RESOURCES_DIR = "resources/"


class SourceArchive:
    """
    Read-only view of a workbook archive held in memory.
    """

    def __init__(self, data: bytes):
        """
        Open archive bytes.

        Raises:
            zipfile.BadZipFile: If the data is not a zip archive
        """
        self.data = data
        # Fail early on anything that is not a zip
        with self._open() as zf:
            self._names = zf.namelist()

    def _open(self) -> zipfile.ZipFile:
        return zipfile.ZipFile(io.BytesIO(self.data), "r")

    def has_entry(self, name: str) -> bool:
        return name in self._names

    def entries(self, prefix: str) -> List[str]:
        """List the file members under prefix, relative to it."""
        return [
            name[len(prefix):]
            for name in self._names
            if name.startswith(prefix) and not name.endswith("/") and len(name) > len(prefix)
        ]

    def read_bytes(self, name: str) -> bytes:
        with self._open() as zf:
            return zf.read(name)

    def read_text(self, name: str, encoding: str = "utf-8") -> str:
        return self.read_bytes(name).decode(encoding)


@dataclass
class SourceDocument:
    """
    A loaded source: its label (file name), content.json text and archive.
    """
    label: str
    content_json: str
    archive: SourceArchive


def is_unsafe_member_path(member_name: str, dest_dir: Path) -> bool:
    """Return True when an archive member path would escape dest_dir."""
    normalized = member_name.replace("\\", "/")
    if not normalized or normalized == ".":
        return True
    if normalized == ".." or normalized.startswith(("/", "../")):
        return True
    if "/../" in normalized or normalized.endswith("/.."):
        return True
    if re.match(r"^[a-zA-Z]:", normalized):
        return True

    dest_root = dest_dir.resolve()
    candidate = (dest_dir / normalized).resolve()
    try:
        candidate.relative_to(dest_root)
    except ValueError:
        return True
    return False
