"""
Record declarations: metadata annotations and the NormEntity base.
"""

from sqlnorm.metadata.annotations import Column, PrimaryKey, Reference, collection_name
from sqlnorm.models.entity import NormEntity

__all__ = [
    "Column",
    "PrimaryKey",
    "Reference",
    "collection_name",
    "NormEntity",
]
