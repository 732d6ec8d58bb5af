from .adapter import (
    QueryOutputAdapter,
    char_column,
    QueryDialect,
    NumberedDialect,
    AtCaptureDialect,
    KeyValueDialect,
    RawCapture,
)
from .source import TreeSitterCaptureSource

__all__ = [
    "QueryOutputAdapter",
    "char_column",
    "QueryDialect",
    "NumberedDialect",
    "AtCaptureDialect",
    "KeyValueDialect",
    "RawCapture",
    "TreeSitterCaptureSource",
]
