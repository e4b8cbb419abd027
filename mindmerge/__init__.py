"""
Mindmerge: merges a directory of mind-map workbooks into one master workbook.

Source trees get fresh topic ids and are appended under a single root, with
optional attribution notes, consolidation of matching top-level topics,
title sorting and folding.
"""

__version__ = "0.1.0"
__author__ = "Mindmerge Project"

# Import main components
from .errors import FatalMergeError, MergeError, NoteShapeError, SourceReadError
from .models import Sheet, Topic, MergeLog, MergeStatus
from .importers import XMindImporter
from .merge import MergeOptions, MergeSession, ResourceCollector
from .writer import ArchiveWriter, load_template_sheet

__all__ = [
    "FatalMergeError",
    "MergeError",
    "NoteShapeError",
    "SourceReadError",
    "Sheet",
    "Topic",
    "MergeLog",
    "MergeStatus",
    "XMindImporter",
    "MergeOptions",
    "MergeSession",
    "ResourceCollector",
    "ArchiveWriter",
    "load_template_sheet"
]
