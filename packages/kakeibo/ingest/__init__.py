"""Statement ingestion: encoding fallback, format detection and row parsing."""

from .detect import detect_format
from .encoding import decode_and_detect, load_text
from .reader import parse_rows
from .utils import parse_statement, read_statement_file

__all__ = [
    "detect_format",
    "decode_and_detect",
    "load_text",
    "parse_rows",
    "parse_statement",
    "read_statement_file",
]
