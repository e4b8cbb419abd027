"""
Template access for Mindmerge.

The template directory holds the empty master workbook (content.json, with a
detached "merge log" topic) and the auxiliary files copied verbatim into
every output archive.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from ..errors import FatalMergeError
from ..importers.archive import CONTENT_FILE
from ..models import Sheet

AUXILIARY_FILES = ["content.xml", "metadata.json"]


def load_template_sheet(template_dir: Path) -> Sheet:
    """
    Load the master sheet from the template's content.json.

    Raises:
        FatalMergeError: If the file is unreadable or has no merge log topic
    """
    path = Path(template_dir) / CONTENT_FILE
    try:
        with open(path, 'r', encoding='utf-8') as f:
            workbook = json.load(f)
        sheet = Sheet.model_validate(workbook[0])
    except (OSError, ValueError, ValidationError, IndexError, KeyError, TypeError) as e:
        raise FatalMergeError(f"Unable to load template {path}: {e}") from e

    root = sheet.root_topic
    if root is None or root.children is None or not root.children.detached:
        raise FatalMergeError(f"Template {path} has no detached merge log topic")

    logging.info(f"Loaded template from {path}")
    return sheet


def read_auxiliary_file(template_dir: Path, name: str) -> bytes:
    """
    Read a template file that is copied unchanged into the output.

    Raises:
        FatalMergeError: If the file cannot be read
    """
    path = Path(template_dir) / name
    try:
        return path.read_bytes()
    except OSError as e:
        raise FatalMergeError(str(e)) from e
