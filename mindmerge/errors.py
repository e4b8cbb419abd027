"""
Exception types for Mindmerge.

Fatal errors abort the whole run. Source and note errors are caught by the
merge session and recorded in the run log instead.
"""


class MergeError(Exception):
    """Base class for all Mindmerge errors."""


class FatalMergeError(MergeError):
    """The run cannot continue (unreadable source directory, template or output)."""


class SourceReadError(MergeError):
    """A single source document could not be read and is skipped."""

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source


class NoteShapeError(MergeError):
    """A topic note does not have the plain/html(/ops) shape the merge expects."""
