"""
Presentation passes over the master tree: title sort and branch folding.
"""

from ..models import Topic

FOLDED = "folded"


def _title_key(topic: Topic):
    # Untitled topics go last
    return (topic.title is None, topic.title or "")


def sort_topics(topic: Topic) -> None:
    """Sort every attached list under topic by title, recursively. Detached lists keep their order."""
    if topic.children is None or topic.children.attached is None:
        return
    topic.children.attached = sorted(topic.children.attached, key=_title_key)
    for child in topic.children.attached:
        sort_topics(child)


def fold_topics(root: Topic) -> int:
    """Mark root's top-level attached topics that have children as folded."""
    folded = 0
    for topic in root.attached:
        if topic.children is not None:
            topic.branch = FOLDED
            folded += 1
    return folded
