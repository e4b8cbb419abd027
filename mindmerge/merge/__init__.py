"""Tree merge core: identity, resources, attribution, consolidation and ordering."""

from .attribution import annotate_topics
from .consolidation import consolidate_topics
from .identity import IdentityGenerator
from .ordering import fold_topics, sort_topics
from .resources import ResourceCollector, ResourceStatus
from .session import MergeOptions, MergeSession

__all__ = [
    "annotate_topics",
    "consolidate_topics",
    "IdentityGenerator",
    "fold_topics",
    "sort_topics",
    "ResourceCollector",
    "ResourceStatus",
    "MergeOptions",
    "MergeSession"
]
