"""
Source attribution notes.

Each merged topic can carry a note line naming the file it came from, so the
origin of a topic is not lost once trees are combined or consolidated.
"""

import logging
from typing import List, Optional

from ..errors import NoteShapeError
from ..models import NoteBundle, Topic

ATTRIBUTION_TAG = "Merge-Source: "


def annotate_topics(topics: List[Topic], source_label: str, recursive: bool,
                    tag: str = ATTRIBUTION_TAG,
                    errors: Optional[List[str]] = None) -> List[str]:
    """
    Add an attribution note line to each topic.

    Args:
        topics: Topics to annotate, in place
        source_label: Source file name written into the note
        recursive: Also annotate attached and detached descendants
        tag: Prefix of the attribution line
        errors: List to collect problems into (a new one if None)

    Returns:
        Messages for notes that could not be updated. Those notes are left
        exactly as they were.
    """
    if errors is None:
        errors = []
    line = tag + source_label

    for topic in topics:
        if recursive and topic.children is not None:
            if topic.children.attached is not None:
                annotate_topics(topic.children.attached, source_label, recursive, tag, errors)
            if topic.children.detached is not None:
                annotate_topics(topic.children.detached, source_label, recursive, tag, errors)

        if topic.notes is None:
            topic.notes = NoteBundle.from_line(line).to_json()
            continue

        try:
            bundle = NoteBundle.check(topic.notes)
        except NoteShapeError as e:
            message = f"Unable to add to existing note in '{source_label}': {e}"
            logging.warning(message)
            errors.append(message)
            continue

        bundle.append_line(line)
        topic.notes = bundle.to_json()

    return errors
