"""
Consolidation of matching top-level topics.

Top-level attached topics whose titles match case-insensitively are folded
into the first of them: notes are joined and attached children concatenated.
Detached topics and anything below the top level are left alone.
"""

import logging
from typing import Callable, List, Optional

from ..errors import NoteShapeError
from ..models import NoteBundle, Topic

Reporter = Callable[[str], None]


def match_topic(topic: Topic, candidates: List[Topic]) -> int:
    """
    Return the index of the first candidate whose title matches topic's
    case-insensitively, or -1. Untitled topics never match.
    """
    if topic.title is None:
        return -1
    key = topic.title.casefold()
    for index, candidate in enumerate(candidates):
        if candidate.title is not None and candidate.title.casefold() == key:
            return index
    return -1


def merge_notes(target: Topic, source: Topic) -> None:
    """
    Merge source's notes into target's.

    Raises:
        NoteShapeError: If either note is malformed; target is then unchanged
    """
    if source.notes is None:
        return
    if target.notes is None:
        target.notes = source.notes
        return

    merged = NoteBundle.check(target.notes)
    merged.extend(NoteBundle.check(source.notes))
    target.notes = merged.to_json()


def consolidate_topics(root: Topic, report: Optional[Reporter] = None) -> int:
    """
    Consolidate root's top-level attached topics in place.

    Args:
        root: Root topic of the master tree
        report: Called with a warning message when notes cannot be merged

    Returns:
        Number of topics folded into an earlier match
    """
    consolidated: List[Topic] = []
    count = 0

    for topic in root.attached:
        index = match_topic(topic, consolidated)
        if index == -1:
            consolidated.append(topic)
            continue

        count += 1
        match = consolidated[index]

        try:
            merge_notes(match, topic)
        except NoteShapeError as e:
            message = (f"Unable to merge notes within top-level topic '{match.title}', "
                       f"possible note data loss: {e}")
            logging.warning(message)
            if report is not None:
                report(message)

        if topic.children is not None and topic.children.attached is not None:
            match.ensure_attached().extend(topic.children.attached)
        # A duplicate without attached children is dropped; match stands in for it

    if count > 0:
        root.children.attached = consolidated

    logging.info(f"Consolidated {count} top-level topics")
    return count
