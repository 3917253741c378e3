"""
ISBN parsing and formatting.

A raw code (ISBN-10, ISBN-13, EAN, with or without hyphens and check
character) is decomposed into product, registration group, registrant and
publication codes using the range table, then re-rendered in any supported
format with a freshly computed check character.

Usage:
    isbn = parse("978-0-306-40615-7")
    isbn.format("ISBN-10")      # '0-306-40615-2'
    isbn.format("GTIN-14", 1)   # '19780306406154'
"""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from isbnkit.services.checksum import gtin_checksum, isbn10_checksum
from isbnkit.services.ranges import RangeTable, Rule, get_range_table
from isbnkit.utils.messages import (
    ERROR_EMPTY, ERROR_INVALID_CHARACTERS, ERROR_INVALID_LENGTH,
    ERROR_INVALID_PRODUCT_CODE, ERROR_INVALID_COUNTRY_CODE,
    ERROR_CANNOT_FORMAT_INVALID, ERROR_INVALID_GTIN14_PREFIX,
)

logger = logging.getLogger(__name__)

# Output formats
ISBN10 = 'ISBN-10'
ISBN13 = 'ISBN-13'
ISBN = 'ISBN'
GTIN14 = 'GTIN-14'
EAN = 'EAN'
FORMATS = (ISBN10, ISBN13, ISBN, GTIN14, EAN)

PRODUCT_CODES = ('978', '979')
LEGACY_PRODUCT_CODE = 978
DEFAULT_GTIN14_PREFIX = 1

FORMATTING_CHARACTERS = ('-', '_', ' ')
# Range rules are 7 digits wide
LOOKUP_WIDTH = 7

_DIGITS = re.compile(r'[0-9]+')


class ErrorKind(Enum):
    EMPTY = ERROR_EMPTY
    INVALID_CHARACTERS = ERROR_INVALID_CHARACTERS
    INVALID_LENGTH = ERROR_INVALID_LENGTH
    INVALID_PRODUCT_CODE = ERROR_INVALID_PRODUCT_CODE
    INVALID_COUNTRY_CODE = ERROR_INVALID_COUNTRY_CODE
    CANNOT_FORMAT_INVALID = ERROR_CANNOT_FORMAT_INVALID

    @property
    def message(self) -> str:
        return self.value


class IsbnError(ValueError):
    """Base class for ISBN errors raised at the API boundary."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or kind.message)


class IsbnValidationError(IsbnError):
    """Raised by Isbn.validate() with the first recorded error."""


class IsbnFormatError(IsbnError):
    """Raised when formatting a code that did not parse cleanly."""

    def __init__(self, isbn: 'Isbn'):
        self.isbn = isbn
        self.errors = isbn.errors
        super().__init__(
            ErrorKind.CANNOT_FORMAT_INVALID,
            ERROR_CANNOT_FORMAT_INVALID % {'errors': isbn.get_errors()},
        )


def _text(value) -> str:
    return '' if value is None else str(value)


def normalize_format(fmt: Optional[str]) -> str:
    """Case-insensitive format name; anything unrecognized means EAN."""
    if fmt is None:
        return EAN
    fmt = str(fmt).strip().upper()
    return fmt if fmt in FORMATS else EAN


def _gtin14_prefix(prefix) -> str:
    prefix = _text(prefix).strip()
    if len(prefix) != 1 or not _DIGITS.fullmatch(prefix):
        raise ValueError(ERROR_INVALID_GTIN14_PREFIX % {'prefix': prefix})
    return prefix


@dataclass(frozen=True)
class Isbn:
    """
    Result of parsing a raw code.

    Fields stay None until the matching decomposition step succeeds.
    ``errors`` keeps every structural problem in the order it was found;
    the code is valid only when it is empty.
    """

    raw: Optional[str]
    product: Optional[int] = None
    group: Optional[str] = None
    registrant: Optional[str] = None
    publication: Optional[str] = None
    agency: Optional[str] = None
    errors: Tuple[ErrorKind, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors

    def is_valid(self) -> bool:
        return self.valid

    # Historical names used by ISBN agencies
    @property
    def country(self) -> Optional[str]:
        return self.group

    @property
    def publisher(self) -> Optional[str]:
        return self.registrant

    def _payload(self, fmt: str, prefix=DEFAULT_GTIN14_PREFIX) -> str:
        if fmt == ISBN10:
            return _text(self.group) + _text(self.registrant) + _text(self.publication)
        gtin_prefix = _gtin14_prefix(prefix) if fmt == GTIN14 else ''
        return (gtin_prefix + _text(self.product) + _text(self.group)
                + _text(self.registrant) + _text(self.publication))

    def checksum(self, fmt: Optional[str] = EAN, prefix=DEFAULT_GTIN14_PREFIX) -> Optional[str]:
        """
        Check character for the requested format, computed on every call.

        ISBN-10 uses the mod 11 algorithm, every other format the EAN/GTIN
        mod 10 one. Returns None for invalid codes.
        """
        if not self.valid:
            return None
        fmt = normalize_format(fmt)
        payload = self._payload(fmt, prefix)
        if fmt == ISBN10:
            return isbn10_checksum(payload)
        return gtin_checksum(payload)

    def format(self, fmt: Optional[str] = EAN, prefix=DEFAULT_GTIN14_PREFIX) -> str:
        """
        Render the code in ISBN-10, ISBN-13 (alias ISBN), GTIN-14 or EAN.

        Args:
            fmt: Output format name, EAN when omitted or unknown
            prefix: GTIN-14 logistic indicator digit (GTIN-14 only)

        Returns:
            Formatted code, e.g. '978-2-07-036002-4' for ISBN-13

        Raises:
            IsbnFormatError: the code is not valid
            ValueError: GTIN-14 prefix is not a single digit
        """
        if not self.valid:
            logger.warning(f"Isbn: Refusing to format invalid code: {self.get_errors()}")
            raise IsbnFormatError(self)

        fmt = normalize_format(fmt)
        checksum = self.checksum(fmt, prefix)

        product = _text(self.product)
        group = _text(self.group)
        registrant = _text(self.registrant)
        publication = _text(self.publication)

        if fmt == ISBN10:
            return f"{group}-{registrant}-{publication}-{checksum}"
        if fmt in (ISBN13, ISBN):
            return f"{product}-{group}-{registrant}-{publication}-{checksum}"
        if fmt == GTIN14:
            return f"{_gtin14_prefix(prefix)}{product}{group}{registrant}{publication}{checksum}"
        return f"{product}{group}{registrant}{publication}{checksum}"

    def error_messages(self) -> List[Tuple[ErrorKind, str]]:
        return [(kind, kind.message) for kind in self.errors]

    def get_errors(self) -> str:
        """Diagnostic string: the raw input followed by every error message."""
        diagnostic = f"[{_text(self.raw)}]"
        for kind in self.errors:
            diagnostic += f" {kind.message}"
        return diagnostic

    def validate(self) -> bool:
        """Raise IsbnValidationError for the first recorded error, else True."""
        if self.errors:
            raise IsbnValidationError(self.errors[0])
        return True

    def to_dict(self, prefix=DEFAULT_GTIN14_PREFIX) -> Dict:
        data = {
            'input': self.raw,
            'valid': self.valid,
            'product': self.product,
            'group': self.group,
            'registrant': self.registrant,
            'publication': self.publication,
            'agency': self.agency,
            'errors': [{'kind': kind.name, 'message': message}
                       for kind, message in self.error_messages()],
        }
        if self.valid:
            data['formats'] = {
                ISBN10: self.format(ISBN10),
                ISBN13: self.format(ISBN13),
                EAN: self.format(EAN),
                GTIN14: self.format(GTIN14, prefix),
            }
        return data


# Decomposition steps. Each takes the partial result and the remaining
# characters and returns both, updated.

def _with_error(isbn: Isbn, kind: ErrorKind) -> Isbn:
    return replace(isbn, errors=isbn.errors + (kind,))


def _strip_formatting(code: str) -> str:
    for char in FORMATTING_CHARACTERS:
        code = code.replace(char, '')
    return code


def _remove_checksum(isbn: Isbn, code: str) -> Tuple[Isbn, str]:
    # The check character is always recomputed, never trusted
    if len(code) in (10, 13):
        return isbn, code[:-1]
    if len(code) in (9, 12):
        return isbn, code
    return _with_error(isbn, ErrorKind.INVALID_LENGTH), code


def _check_characters(isbn: Isbn, code: str) -> Tuple[Isbn, str]:
    if _DIGITS.fullmatch(code):
        return isbn, code
    return _with_error(isbn, ErrorKind.INVALID_CHARACTERS), code


def _remove_product_code(isbn: Isbn, code: str) -> Tuple[Isbn, str]:
    # ISBN-10 payloads carry no product code, 978 is implied
    if len(code) == 9:
        return replace(isbn, product=LEGACY_PRODUCT_CODE), code

    first3 = code[:3]
    if first3 in PRODUCT_CODES:
        return replace(isbn, product=int(first3)), code[3:]

    return _with_error(isbn, ErrorKind.INVALID_PRODUCT_CODE), code


def _first_match(rules, digits: str, width: Optional[int] = None) -> Optional[Rule]:
    for rule in rules:
        if rule.contains(digits, width):
            return rule
    return None


def _remove_group_code(isbn: Isbn, code: str, ranges: RangeTable) -> Tuple[Isbn, str]:
    # Product already reported as invalid
    if isbn.product is None:
        return isbn, code

    rules = ranges.prefix_rules(isbn.product)
    rule = _first_match(rules, code[:LOOKUP_WIDTH])

    if rule is None or rule.length == 0:
        return _with_error(isbn, ErrorKind.INVALID_COUNTRY_CODE), code

    return replace(isbn, group=code[:rule.length]), code[rule.length:]


def _remove_registrant_code(isbn: Isbn, code: str, ranges: RangeTable) -> Tuple[Isbn, str]:
    found = ranges.group_rules(isbn.product, isbn.group)
    if found is None:
        # TODO: record a distinct error kind once callers stop relying on
        # unknown groups being accepted
        return isbn, code

    agency, rules = found
    isbn = replace(isbn, agency=agency)

    first7 = code[:LOOKUP_WIDTH]
    # Shorter codes compare against the same number of leading range digits
    rule = _first_match(rules, first7, width=len(first7))
    if rule is None:
        return isbn, code

    return replace(isbn, registrant=code[:rule.length], publication=code[rule.length:]), ''


def parse(code: Optional[str], ranges: Optional[RangeTable] = None) -> Isbn:
    """
    Decompose a raw code. Never raises on bad input: problems are recorded
    in ``Isbn.errors``.

    Args:
        code: Raw code, hyphens, underscores and spaces allowed
        ranges: Range table to use, the shared default table when omitted

    Returns:
        Isbn result (check ``is_valid()`` before formatting)
    """
    isbn = Isbn(raw=code)

    if code is None or not str(code).strip():
        return _with_error(isbn, ErrorKind.EMPTY)

    if ranges is None:
        ranges = get_range_table()

    remainder = _strip_formatting(str(code))
    isbn, remainder = _remove_checksum(isbn, remainder)
    isbn, remainder = _check_characters(isbn, remainder)
    isbn, remainder = _remove_product_code(isbn, remainder)
    isbn, remainder = _remove_group_code(isbn, remainder, ranges)
    isbn, remainder = _remove_registrant_code(isbn, remainder, ranges)

    if isbn.errors:
        logger.debug(f"Isbn: {isbn.get_errors()} ({', '.join(k.name for k in isbn.errors)})")

    return isbn


def is_valid(isbn: Isbn) -> bool:
    return isbn.is_valid()


def format_isbn(isbn: Isbn, fmt: Optional[str] = EAN, prefix=DEFAULT_GTIN14_PREFIX) -> str:
    return isbn.format(fmt, prefix)


def errors(isbn: Isbn) -> List[Tuple[ErrorKind, str]]:
    return isbn.error_messages()


def to_isbn13(code: str, ranges: Optional[RangeTable] = None) -> str:
    """Hyphenated ISBN-13 for any accepted input. Raises IsbnFormatError if invalid."""
    return parse(code, ranges).format(ISBN13)


def to_isbn10(code: str, ranges: Optional[RangeTable] = None) -> str:
    """Hyphenated ISBN-10 for any accepted input. Raises IsbnFormatError if invalid."""
    return parse(code, ranges).format(ISBN10)


def validate_isbn(code: str, ranges: Optional[RangeTable] = None) -> Tuple[bool, str]:
    """
    Validate a code and return its hyphenated ISBN-13.

    Args:
        code: ISBN string

    Returns:
        Tuple of (is_valid, formatted_isbn), formatted_isbn is '' when invalid
    """
    isbn = parse(code, ranges)
    if not isbn.is_valid():
        return False, ""

    return True, isbn.format(ISBN13)
