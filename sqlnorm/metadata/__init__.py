"""
Entity metadata: annotations, descriptors and the memoizing registry.
"""

from sqlnorm.metadata.annotations import (
    Column,
    PrimaryKey,
    Reference,
    collection_name,
    declared_collection_name,
)
from sqlnorm.metadata.descriptors import (
    ColumnDescriptor,
    EntityDescriptor,
    ReferenceDescriptor,
    SemanticType,
)
from sqlnorm.metadata.registry import MetadataRegistry, default_registry

__all__ = [
    "Column",
    "PrimaryKey",
    "Reference",
    "collection_name",
    "declared_collection_name",
    "ColumnDescriptor",
    "EntityDescriptor",
    "ReferenceDescriptor",
    "SemanticType",
    "MetadataRegistry",
    "default_registry",
]
