"""Template loading and output packaging."""

from .archive import ArchiveWriter
from .template import AUXILIARY_FILES, load_template_sheet

__all__ = ["ArchiveWriter", "AUXILIARY_FILES", "load_template_sheet"]
