"""
Document mapping.

Explicit declarations translating records to MongoDB documents, and the
index maintenance driven by those declarations.
"""

from .document import DocumentMapping, FieldMapping, IndexSpec, MappedDocument
from .indexes import ensure_indexes

__all__ = [
    "DocumentMapping",
    "FieldMapping",
    "IndexSpec",
    "MappedDocument",
    "ensure_indexes",
]
