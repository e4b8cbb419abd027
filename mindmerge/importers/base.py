"""
Base importer interface for Mindmerge.

This module defines the abstract interface that all source importers must implement.
"""

from abc import ABC, abstractmethod
from typing import List

from .archive import SourceDocument


class BaseImporter(ABC):
    """
    Abstract base class for all source importers.
    
    An importer finds the source documents of a run and loads each one into
    a SourceDocument the merge session can consume.
    """
    
    @abstractmethod
    def list_sources(self) -> List[str]:
        """
        List the names of all source documents to merge, in merge order.
        
        Raises:
            FatalMergeError: If the source location cannot be read or is empty
        """
        pass
        
    @abstractmethod  
    def load(self, name: str) -> SourceDocument:
        """
        Load one source document.
        
        Raises:
            SourceReadError: If the document cannot be read
        """
        pass
