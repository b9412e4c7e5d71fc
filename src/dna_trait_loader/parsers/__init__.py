"""Raw DNA export parsing modules."""

from .format_detection import (
    FileFormat,
    detect_file_format,
    detect_structural_format,
    is_comment_line,
    is_header_line,
)
from .line_parser import calculate_confidence, parse_line

__all__ = [
    "FileFormat",
    "calculate_confidence",
    "detect_file_format",
    "detect_structural_format",
    "is_comment_line",
    "is_header_line",
    "parse_line",
]
