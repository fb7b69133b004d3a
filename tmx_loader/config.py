"""Loader configuration"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LoaderConfig:
    """
    Options for TmxLoader.

    max_document_bytes bounds how much input is read before XML parsing.
    Larger documents fail to load. Text streams are measured by their UTF-8
    encoded size. None means no limit.
    """
    max_document_bytes: Optional[int] = None

    def __post_init__(self):
        if self.max_document_bytes is not None and self.max_document_bytes <= 0:
            raise ValueError("max_document_bytes must be positive")
