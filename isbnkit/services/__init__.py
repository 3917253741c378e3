"""
ISBN services.

Range table lookups, ISBN decomposition and formatting, check characters.
"""

from isbnkit.services.ranges import (
    RangeTable, RangeTableError, Rule, get_range_table, set_default_range_file,
)
from isbnkit.services.isbn import (
    Isbn, ErrorKind, IsbnError, IsbnFormatError, IsbnValidationError,
    parse, is_valid, format_isbn, errors, to_isbn10, to_isbn13, validate_isbn,
)
from isbnkit.services.checksum import isbn10_checksum, gtin_checksum

__all__ = [
    'RangeTable',
    'RangeTableError',
    'Rule',
    'get_range_table',
    'set_default_range_file',
    'Isbn',
    'ErrorKind',
    'IsbnError',
    'IsbnFormatError',
    'IsbnValidationError',
    'parse',
    'is_valid',
    'format_isbn',
    'errors',
    'to_isbn10',
    'to_isbn13',
    'validate_isbn',
    'isbn10_checksum',
    'gtin_checksum',
]
