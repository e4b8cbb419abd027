"""
Output packaging for Mindmerge.

Writes the merged master sheet, the staged resources, a manifest and the
template's auxiliary files into a new workbook archive.
"""

import json
import logging
import zipfile
from pathlib import Path
from typing import Any, Dict, List

from ..errors import FatalMergeError
from ..importers.archive import CONTENT_FILE, MANIFEST_FILE, RESOURCES_DIR
from ..merge.resources import ResourceCollector
from ..models import Sheet
from .template import AUXILIARY_FILES, read_auxiliary_file


class ArchiveWriter:
    """
    Packages a merged sheet into a workbook archive.
    """

    def __init__(self, template_dir: Path):
        """
        Initialize the writer.

        Args:
            template_dir: Directory holding the auxiliary template files
        """
        self.template_dir = Path(template_dir)

    def build_entries(self, sheet: Sheet, collector: ResourceCollector) -> Dict[str, bytes]:
        """
        Assemble every archive entry, consuming the staged resources.

        Raises:
            FatalMergeError: If an auxiliary template file cannot be read
        """
        entries: Dict[str, bytes] = {}
        manifest: Dict[str, Any] = {
            "file-entries": {
                CONTENT_FILE: {},
                "metadata.json": {}
            }
        }

        for name, scratch_file in collector.staged():
            try:
                entries[RESOURCES_DIR + name] = scratch_file.read_bytes()
            except OSError as e:
                logging.error(f"Unable to package resource {name}: {e}")
                continue
            manifest["file-entries"][RESOURCES_DIR + name] = {}
            collector.discard(name)

        entries[MANIFEST_FILE] = json.dumps(manifest).encode("utf-8")

        for name in AUXILIARY_FILES:
            entries[name] = read_auxiliary_file(self.template_dir, name)

        entries[CONTENT_FILE] = json.dumps([sheet.to_json()]).encode("utf-8")
        return entries

    def write(self, sheet: Sheet, collector: ResourceCollector, destination: Path) -> List[str]:
        """
        Write the output archive.

        Returns:
            Names of the entries written

        Raises:
            FatalMergeError: If a template file is unreadable or the archive cannot be written
        """
        entries = self.build_entries(sheet, collector)
        try:
            with zipfile.ZipFile(destination, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for name, data in entries.items():
                    zf.writestr(name, data)
        except OSError as e:
            raise FatalMergeError(str(e)) from e

        logging.info(f"Wrote {len(entries)} entries to {destination}")
        return list(entries)
