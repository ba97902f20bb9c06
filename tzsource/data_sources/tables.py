"""Parsing of the `iso3166.tab` and zone tables distributed with tzdata."""

import re
import logging
from typing import Dict, List, Iterable, Iterator
from fractions import Fraction

from tzsource.info import CountryInfo, CountryTimezone

logger = logging.getLogger(__name__)

ISO3166_TAB = 'iso3166.tab'

# In order of preference
ZONE_TABS = ('zone1970.tab', 'zone.tab')

RE_ISO3166_LINE = re.compile(r'^([A-Z]{2})\t(.+)$')

RE_ZONE_TAB_LINE = re.compile(
    r'^([A-Z]{2}(?:,[A-Z]{2})*)\t'  # Country codes
    r'([+\-]\d+)([+\-]\d+)\t'  # ISO 6709 coordinates
    r'([^\t]+)(?:\t([^\t]+))?$',  # Identifier and optional comment
)


def parse_coordinate(value: str, degree_digits: int) -> Fraction:
    """Parse one half of an ISO 6709 `±DDMM[SS]` coordinate to degrees."""
    sign, digits = value[0], value[1:]

    if len(digits) not in (degree_digits + 2, degree_digits + 4):
        raise ValueError(f"Invalid ISO 6709 coordinate: {value}")

    degrees = int(digits[:degree_digits])
    minutes = int(digits[degree_digits:degree_digits + 2])
    seconds = int(digits[degree_digits + 2:] or '0')

    result = degrees + Fraction(minutes, 60) + Fraction(seconds, 3600)
    return -result if sign == '-' else result


def table_lines(lines: Iterable[str]) -> Iterator[str]:
    """Strip line endings, comments and blank lines from a table."""
    for line in lines:
        line = line.rstrip('\r\n')
        if line and not line.startswith('#'):
            yield line


def load_countries(
    iso3166_lines: Iterable[str],
    zone_tab_lines: Iterable[str],
    source: str,
) -> Dict[str, CountryInfo]:
    """
    Build the `CountryInfo` for every country listed in `iso3166.tab`.

    `zone_tab_lines` may come from either `zone1970.tab`, where a zone lists
    every country it is used in, or the older `zone.tab`. Lines which cannot
    be parsed are skipped with a warning naming `source`.
    """
    names: Dict[str, str] = {}

    for line in table_lines(iso3166_lines):
        match = RE_ISO3166_LINE.match(line)
        if match is not None:
            names[match.group(1)] = match.group(2)

    zones: Dict[str, List[CountryTimezone]] = {}

    for line in table_lines(zone_tab_lines):
        match = RE_ZONE_TAB_LINE.match(line)
        if match is None:
            continue

        codes, latitude, longitude, identifier, description = match.groups()

        try:
            zone = CountryTimezone(
                identifier=identifier,
                latitude=parse_coordinate(latitude, 2),
                longitude=parse_coordinate(longitude, 3),
                description=description,
            )
        except ValueError:
            logger.warning(f"Skipping invalid line in {source}: {line}")
            continue

        for code in codes.split(','):
            zones.setdefault(code, []).append(zone)

    return {
        code: CountryInfo(code, name, zones.get(code, ()))
        for code, name in names.items()
    }
