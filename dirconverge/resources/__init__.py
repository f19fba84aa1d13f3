"""
Dirconverge Resources - Pydantic models for declared directories.
"""

from .directory import DirectoryResource

__all__ = [
    "DirectoryResource",
]
