"""
Stock file name grammar.

    stock_<supplierId>_<countryCode>_<YYYYMMDDHHMMSS>.<csv|xlsx>

Parsing never raises: a non-matching name yields None, and the
timestamp is judged separately by check_timestamp() so callers can tell
a grammar mismatch from a bad timestamp.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

FILE_NAME_PATTERN = re.compile(
    r"stock_(?P<supplier_id>\d+)_(?P<country_code>[A-Z]{2})_(?P<timestamp>\d{14})\.(?P<extension>csv|xlsx)",
    re.IGNORECASE,
)
COUNTRY_PATTERN = re.compile(r"[A-Z]{2}")
EXTENSION_PATTERN = re.compile(r"\.(?P<extension>[^.\s]+)\Z")
SUPPLIER_ID_PATTERN = re.compile(r"_(\d+)_")

TIMESTAMP_LENGTH = 14
YEAR_RANGE = (2020, 2030)


@dataclass(frozen=True)
class ParsedFileName:
    """Named groups of a file name that matched the grammar."""

    supplier_id: str
    country_code: str
    timestamp: str
    extension: str

    @property
    def timestamp_valid(self) -> bool:
        return check_timestamp(self.timestamp)


def parse_file_name(file_name: str) -> ParsedFileName | None:
    """Return the named groups, or None if the name does not match."""
    match = FILE_NAME_PATTERN.fullmatch(file_name)
    if match is None:
        return None
    return ParsedFileName(
        supplier_id=match.group("supplier_id"),
        country_code=match.group("country_code"),
        timestamp=match.group("timestamp"),
        extension=match.group("extension").lower(),
    )


def check_timestamp(timestamp: str | None) -> bool:
    """
    Loose calendar check of a YYYYMMDDHHMMSS string.

    Days are only bounded to 1..31; month lengths and leap years are
    deliberately not checked.
    """
    if not timestamp or len(timestamp) != TIMESTAMP_LENGTH:
        return False
    if not (timestamp.isascii() and timestamp.isdigit()):
        return False

    year = int(timestamp[0:4])
    month = int(timestamp[4:6])
    day = int(timestamp[6:8])
    hour = int(timestamp[8:10])
    minute = int(timestamp[10:12])
    second = int(timestamp[12:14])

    return (
        YEAR_RANGE[0] <= year <= YEAR_RANGE[1]
        and 1 <= month <= 12
        and 1 <= day <= 31
        and 0 <= hour <= 23
        and 0 <= minute <= 59
        and 0 <= second <= 59
    )


def get_country(file_name: str) -> str:
    """First run of two upper-case letters, or "" if there is none."""
    match = COUNTRY_PATTERN.search(file_name)
    return match.group(0) if match else ""


def get_inbound_channel(file_name: str) -> str:
    """Lower-cased file extension ("csv" / "xlsx")."""
    match = EXTENSION_PATTERN.search(file_name)
    return match.group("extension").lower() if match else ""


def extract_supplier_id(file_name: str) -> str | None:
    """First `_<digits>_` run of the file name."""
    match = SUPPLIER_ID_PATTERN.search(file_name)
    return match.group(1) if match else None
