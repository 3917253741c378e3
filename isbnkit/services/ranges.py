"""
ISBN registrant range table.

Read-only view over the ISBN International "RangeMessage" dataset:
- prefix rules: product code (978/979) -> how many digits form the group code
- group rules: "<product>-<group>" -> agency name and how many digits form
  the registrant code

The XML file is parsed once per path and shared by every parse. No copy of
the dataset ships with the package; the operator provides the current
RangeMessage.xml (see RANGE_MESSAGE_URL) and configures its path.
Download/refresh of the file is not handled here.
"""

import logging
import os
import re
import threading
import xml.etree.ElementTree as ET
from types import MappingProxyType
from typing import Dict, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

RANGE_MESSAGE_URL = 'https://www.isbn-international.org/range_file_generation'

_DIGITS = re.compile(r'[0-9]+')

class RangeTableError(Exception):
    """The range dataset could not be loaded. Fatal, never means 'no rules'."""


class Rule(NamedTuple):
    """One `<Rule>` of the dataset: a digit range and the field length it grants."""

    range_low: str
    range_high: str
    length: int
    agency: Optional[str] = None

    def contains(self, digits: str, width: Optional[int] = None) -> bool:
        """
        Check whether ``digits`` falls inside the range.

        Comparison is lexicographic on the fixed-width digit strings, so
        leading zeros are significant. When ``width`` is given both bounds
        are truncated to that many characters first (codes shorter than the
        range width).
        """
        low, high = self.range_low, self.range_high
        if width is not None:
            low, high = low[:width], high[:width]
        return low <= digits <= high


def _parse_rule(element, agency: Optional[str], where: str) -> Rule:
    range_text = (element.findtext('Range') or '').strip()
    length_text = (element.findtext('Length') or '').strip()

    bounds = range_text.split('-')
    if len(bounds) != 2 or not all(_DIGITS.fullmatch(b) for b in bounds):
        raise RangeTableError(f"Malformed range '{range_text}' in {where}")
    if len(bounds[0]) != len(bounds[1]):
        raise RangeTableError(f"Range bounds of different width '{range_text}' in {where}")

    try:
        length = int(length_text)
    except ValueError:
        raise RangeTableError(f"Invalid rule length '{length_text}' in {where}") from None
    if length < 0:
        raise RangeTableError(f"Negative rule length '{length_text}' in {where}")

    return Rule(bounds[0], bounds[1], length, agency)


def _parse_rules(entry, agency: Optional[str], where: str) -> Tuple[Rule, ...]:
    return tuple(_parse_rule(r, agency, where) for r in entry.findall('./Rules/Rule'))


def load_range_message(path: str) -> Dict:
    """
    Parse a RangeMessage.xml file.

    Args:
        path: Path to the XML file

    Returns:
        Dict with 'prefixes' (product -> rules), 'groups'
        ("product-group" -> (agency, rules)) and the message metadata

    Raises:
        RangeTableError: file missing, unreadable or not a range message
    """
    try:
        tree = ET.parse(path)
    except FileNotFoundError:
        raise RangeTableError(
            f"Range file not found: {path} (download the current RangeMessage.xml from {RANGE_MESSAGE_URL})"
        ) from None
    except (OSError, ET.ParseError) as e:
        raise RangeTableError(f"Cannot read range file {path}: {e}") from e

    root = tree.getroot()
    if root.tag != 'ISBNRangeMessage':
        raise RangeTableError(f"{path} is not an ISBN range message (root <{root.tag}>)")

    prefixes: Dict[int, Tuple[Rule, ...]] = {}
    for entry in root.findall('./EAN.UCCPrefixes/EAN.UCC'):
        prefix = (entry.findtext('Prefix') or '').strip()
        if not _DIGITS.fullmatch(prefix):
            raise RangeTableError(f"Invalid EAN.UCC prefix '{prefix}' in {path}")
        agency = (entry.findtext('Agency') or '').strip()
        prefixes[int(prefix)] = _parse_rules(entry, agency, f"prefix {prefix}")

    groups: Dict[str, Tuple[str, Tuple[Rule, ...]]] = {}
    for entry in root.findall('./RegistrationGroups/Group'):
        prefix = (entry.findtext('Prefix') or '').strip()
        product, _, group = prefix.partition('-')
        if not (_DIGITS.fullmatch(product) and _DIGITS.fullmatch(group)):
            raise RangeTableError(f"Invalid registration group '{prefix}' in {path}")
        agency = (entry.findtext('Agency') or '').strip()
        groups[prefix] = (agency, _parse_rules(entry, agency, f"group {prefix}"))

    if not prefixes:
        raise RangeTableError(f"No EAN.UCC prefixes found in {path}")

    return {
        'source': (root.findtext('MessageSource') or '').strip() or None,
        'serial_number': (root.findtext('MessageSerialNumber') or '').strip() or None,
        'message_date': (root.findtext('MessageDate') or '').strip() or None,
        'prefixes': prefixes,
        'groups': groups,
    }


class RangeTable:
    """Immutable lookups over the prefix and registration group rules."""

    def __init__(
        self,
        prefixes: Dict[int, Tuple[Rule, ...]],
        groups: Dict[str, Tuple[str, Tuple[Rule, ...]]],
        source: Optional[str] = None,
        serial_number: Optional[str] = None,
        message_date: Optional[str] = None,
        path: Optional[str] = None,
    ):
        self._prefixes = MappingProxyType({int(k): tuple(v) for k, v in prefixes.items()})
        self._groups = MappingProxyType({k: (agency, tuple(rules)) for k, (agency, rules) in groups.items()})
        self.source = source
        self.serial_number = serial_number
        self.message_date = message_date
        self.path = path

    @classmethod
    def from_xml(cls, path: str) -> 'RangeTable':
        data = load_range_message(path)
        table = cls(
            data['prefixes'],
            data['groups'],
            source=data['source'],
            serial_number=data['serial_number'],
            message_date=data['message_date'],
            path=path,
        )
        logger.info(
            f"RangeTable: Loaded {len(table._prefixes)} prefixes and {len(table._groups)} "
            f"registration groups from {path} (message date: {table.message_date})"
        )
        return table

    @property
    def prefixes(self):
        return self._prefixes

    @property
    def groups(self):
        return self._groups

    def prefix_rules(self, product) -> Tuple[Rule, ...]:
        """Rules giving the group code length for a product code; empty if unknown."""
        if product is None:
            return ()
        try:
            return self._prefixes.get(int(product), ())
        except (TypeError, ValueError):
            return ()

    def group_rules(self, product, group) -> Optional[Tuple[str, Tuple[Rule, ...]]]:
        """(agency, rules) giving the registrant length for a product+group pair, None if absent."""
        if product is None or group is None:
            return None
        return self._groups.get(f"{product}-{group}")

    def describe(self) -> Dict:
        return {
            'source': self.source,
            'serial_number': self.serial_number,
            'message_date': self.message_date,
            'prefixes': sorted(self._prefixes),
            'groups': len(self._groups),
        }


_tables: Dict[str, RangeTable] = {}
_tables_lock = threading.Lock()
_default_path: Optional[str] = None


def set_default_range_file(path: str) -> None:
    """Make ``path`` the dataset used when get_range_table() is called without one."""
    global _default_path
    _default_path = os.path.abspath(path)


def get_range_table(path: Optional[str] = None) -> RangeTable:
    """
    Return the shared RangeTable for ``path`` (the configured default file
    when omitted).

    Each file is loaded at most once per process; concurrent first calls
    wait on the lock and receive the same instance. Load errors propagate
    and nothing is cached for that path.
    """
    path = path or _default_path
    if not path:
        raise RangeTableError(
            f"No range file configured; set ISBN_RANGES_FILE to the RangeMessage.xml "
            f"published at {RANGE_MESSAGE_URL}"
        )

    key = os.path.abspath(path)
    table = _tables.get(key)
    if table is not None:
        return table

    with _tables_lock:
        table = _tables.get(key)
        if table is None:
            table = RangeTable.from_xml(key)
            _tables[key] = table
    return table


def reset_range_table() -> None:
    """Forget every loaded table (next call to get_range_table reloads)."""
    with _tables_lock:
        _tables.clear()


def loaded_paths() -> List[str]:
    return list(_tables)
