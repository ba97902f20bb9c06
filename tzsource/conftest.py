"""Global test setup and fixtures."""

import io
import struct
import tarfile
from typing import Dict, Tuple, Iterable
from pathlib import Path
from unittest import mock

import pytest

from tzsource.info import CountryInfo, TimezoneInfo
from tzsource.registry import DataSourceRegistry
from tzsource.exceptions import InvalidCountryCode, InvalidTimezoneIdentifier
from tzsource.data_source import DataSource

TEST_ISO3166_TAB = """\
# ISO 3166 alpha-2 country codes
#
AQ\tAntarctica
GB\tBritain (UK)
US\tUnited States
"""

TEST_ZONE1970_TAB = """\
# tz zone descriptions
#
#codes\tcoordinates\tTZ\tcomments
GB,GG,IM,JE\t+513030-0000731\tEurope/London
US\t+404251-0740023\tAmerica/New_York\tEastern (most areas)
"""

TEST_ZONE_TAB = """\
# tz zone descriptions
GB\t+513030-0000731\tEurope/London
US\t+404251-0740023\tAmerica/New_York\tEastern (most areas)
"""

TEST_ZONES = {
    'America/New_York': (-18000, 'EST'),
    'Etc/UTC': (0, 'UTC'),
    'Europe/London': (0, 'GMT'),
    'UTC': (0, 'UTC'),
}


def make_tzif(offset: int = 0, abbreviation: str = 'UTC') -> bytes:
    """Build a version 1 TZif file with a single local time type."""
    abbr = abbreviation.encode('ascii') + b'\0'
    return b''.join((
        b'TZif',
        b'\0' * 16,
        struct.pack('>6l', 0, 0, 0, 0, 1, len(abbr)),
        struct.pack('>lbb', offset, 0, 0),
        abbr,
    ))


def make_zoneinfo_dir(
    path: Path,
    zones: Dict[str, Tuple[int, str]] = TEST_ZONES,
    tables: Iterable[str] = ('iso3166.tab', 'zone1970.tab', 'zone.tab'),
) -> Path:
    """Populate `path` as a zoneinfo directory."""
    path.mkdir(parents=True, exist_ok=True)

    for identifier, (offset, abbreviation) in zones.items():
        zone_path = path.joinpath(*identifier.split('/'))
        zone_path.parent.mkdir(parents=True, exist_ok=True)
        zone_path.write_bytes(make_tzif(offset, abbreviation))

    contents = {
        'iso3166.tab': TEST_ISO3166_TAB,
        'zone1970.tab': TEST_ZONE1970_TAB,
        'zone.tab': TEST_ZONE_TAB,
    }
    for table in tables:
        (path / table).write_text(contents[table], encoding='utf-8')

    return path


@pytest.fixture()
def zoneinfo_dir(tmp_path):
    """A zoneinfo directory with a handful of zones and excluded files."""
    path = make_zoneinfo_dir(tmp_path / 'zoneinfo')

    # Files a real zoneinfo directory contains that are not zones
    (path / '+VERSION').write_text('2024a\n')
    (path / 'posixrules').write_bytes(make_tzif())
    (path / 'tzdata.zi').write_text('# version 2024a\n')
    (path / 'leapseconds').write_text('# leap seconds\n')
    (path / 'right').mkdir()
    (path / 'right' / 'UTC').write_bytes(make_tzif())
    (path / 'Europe' / 'README').write_text('not a zone\n')

    return str(path)


@pytest.fixture()
def registry():
    """A registry that will not find any zoneinfo directory."""
    return DataSourceRegistry(
        search_path=[],
        alternate_iso3166_tab_search_path=[],
    )


@pytest.fixture()
def no_bundled_data():
    """Make the data bundled with dateutil unavailable."""
    with mock.patch(
        'dateutil.zoneinfo.getzoneinfofile_stream',
        return_value=None,
    ) as patched:
        yield patched


def make_bundled_tarball(
    metadata: bool = True,
    zones: bool = True,
    extra_links: Iterable[Tuple[str, str]] = (),
) -> bytes:
    """Build a tarball laid out like the one bundled with dateutil."""
    stream = io.BytesIO()

    def add_file(tf, name, data):
        info = tarfile.TarInfo(name)
        info.size = len(data)
        tf.addfile(info, io.BytesIO(data))

    def add_link(tf, name, target, link_type):
        info = tarfile.TarInfo(name)
        info.type = link_type
        info.linkname = target
        tf.addfile(info)

    with tarfile.open(fileobj=stream, mode='w:gz') as tf:
        if zones:
            add_file(tf, 'UTC', make_tzif(0, 'UTC'))
            add_file(tf, 'Europe/London', make_tzif(0, 'GMT'))
            add_file(tf, 'America/New_York', make_tzif(-18000, 'EST'))
            add_link(tf, 'Etc/UTC', 'UTC', tarfile.LNKTYPE)
            add_link(tf, 'GB', 'Europe/London', tarfile.LNKTYPE)
            add_link(tf, 'Europe/Belfast', 'London', tarfile.SYMTYPE)

        for name, target in extra_links:
            add_link(tf, name, target, tarfile.LNKTYPE)

        if metadata:
            add_file(tf, 'METADATA', b'{"tzversion": "2024a"}')

    return stream.getvalue()


@pytest.fixture()
def bundled_tarball():
    """Replace the data bundled with dateutil with a small test tarball."""
    data = make_bundled_tarball()
    with mock.patch(
        'dateutil.zoneinfo.getzoneinfofile_stream',
        side_effect=lambda: io.BytesIO(data),
    ) as patched:
        yield patched


class ListDataSource(DataSource):
    """A data source serving the identifiers and countries it is given."""

    def __init__(
        self,
        data_identifiers: Iterable[str] = ('Test/Aaa', 'Test/Ccc'),
        linked_identifiers: Iterable[str] = ('Test/Bbb',),
    ) -> None:
        super().__init__()
        self.data_identifiers = tuple(data_identifiers)
        self.linked_identifiers = tuple(linked_identifiers)
        self.countries = {'GB': 'Britain (UK)', 'US': 'United States'}

    def data_timezone_identifiers(self):
        return self.data_identifiers

    def linked_timezone_identifiers(self):
        return self.linked_identifiers

    def country_codes(self):
        return frozenset(self.countries)

    def load_timezone_info(self, identifier):
        if identifier not in self.timezone_identifiers():
            raise InvalidTimezoneIdentifier(identifier)
        return TimezoneInfo(identifier)

    def load_country_info(self, code):
        try:
            return CountryInfo(code, self.countries[code])
        except KeyError:
            raise InvalidCountryCode(code) from None


class FailingDataSource(DataSource):
    """A data source which takes one argument and always fails to build."""

    def __init__(self, url: str) -> None:
        super().__init__()
        raise TypeError(f"Cannot read timezone data from {url}")


@pytest.fixture()
def list_data_source():
    """A `ListDataSource` with three timezones and two countries."""
    return ListDataSource()
