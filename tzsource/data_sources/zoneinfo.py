"""Data source backed by a compiled zoneinfo directory."""

import os
import struct
import logging
from typing import (
    Dict,
    Tuple,
    Iterable,
    Iterator,
    Optional,
    FrozenSet,
    NamedTuple,
)

import dateutil.tz

from tzsource.info import CountryInfo, TimezoneInfo, DataTimezoneInfo
from tzsource.exceptions import (
    ConfigError,
    InvalidCountryCode,
    InvalidZoneinfoFile,
    InvalidZoneinfoDirectory,
    InvalidTimezoneIdentifier,
    ZoneinfoDirectoryNotFound,
)
from tzsource.data_source import DataSource
from tzsource.data_sources.tables import (
    ZONE_TABS,
    ISO3166_TAB,
    load_countries,
)

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PATH = (
    '/usr/share/zoneinfo',
    '/usr/share/lib/zoneinfo',
    '/etc/zoneinfo',
)

DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH = (
    '/usr/share/misc/iso3166.tab',
    '/usr/share/misc/iso3166',
)

EXCLUDED_FILENAMES = frozenset((
    '+VERSION',
    'leapseconds',
    'localtime',
    'posix',
    'posixrules',
    'right',
    'SECURITY',
    'src',
    'timeconfig',
))

TZIF_MAGIC = b'TZif'


class ZoneinfoPaths(NamedTuple):
    """The directory and tables making up a valid zoneinfo directory."""
    zoneinfo_dir: str
    iso3166_tab_path: str
    zone_tab_path: str


class ZoneinfoDataSource(DataSource):
    """
    Loads timezone data from a zoneinfo directory on disk.

    The directory must contain an `iso3166.tab` file and either a
    `zone1970.tab` or `zone.tab` file. If no directory is given, the
    `search_path` is tried in order and the first valid directory is used.

    `iso3166.tab` is not always installed alongside the zoneinfo files. An
    explicit path to it may be given as `alternate_iso3166_tab_path`, and when
    searching, the `alternate_iso3166_tab_search_path` is used to find one.
    """

    def __init__(
        self,
        zoneinfo_dir: Optional[str] = None,
        alternate_iso3166_tab_path: Optional[str] = None,
        *,
        search_path: Iterable[str] = DEFAULT_SEARCH_PATH,
        alternate_iso3166_tab_search_path: Iterable[str] = (
            DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH
        ),
    ) -> None:
        super().__init__()

        if zoneinfo_dir is not None:
            zoneinfo_dir = os.fspath(zoneinfo_dir)
            paths = validate_zoneinfo_dir(
                zoneinfo_dir,
                alternate_iso3166_tab_path,
            )
            if paths is None:
                raise InvalidZoneinfoDirectory(
                    _invalid_directory_message(
                        zoneinfo_dir,
                        alternate_iso3166_tab_path,
                    ),
                )
        elif alternate_iso3166_tab_path is not None:
            raise ConfigError(
                "An alternate iso3166.tab path may only be given together "
                "with a zoneinfo directory.",
            )
        else:
            paths = find_zoneinfo_dir(
                search_path,
                alternate_iso3166_tab_search_path,
            )
            if paths is None:
                raise ZoneinfoDirectoryNotFound(
                    "None of the paths included in the zoneinfo search path "
                    "are valid zoneinfo directories.",
                )

        self.zoneinfo_dir = paths.zoneinfo_dir
        self._identifiers = tuple(sorted(_find_timezones(self.zoneinfo_dir)))
        self._country_data = _load_countries(
            paths.iso3166_tab_path,
            paths.zone_tab_path,
        )

        logger.debug(
            f"Found {len(self._identifiers)} zones and "
            f"{len(self._country_data)} countries in {self.zoneinfo_dir}",
        )

    def __str__(self) -> str:
        return f"Zoneinfo DataSource: {self.zoneinfo_dir}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.zoneinfo_dir}>"

    def data_timezone_identifiers(self) -> Tuple[str, ...]:
        """Return the identifiers of every zone file in the directory."""
        return self._identifiers

    def linked_timezone_identifiers(self) -> Tuple[str, ...]:
        """
        Links are not reported.

        Compiled zoneinfo directories store links as copies, hard links or
        symbolic links depending on the platform, so they are indistinguishable
        from data zones and are all reported by `data_timezone_identifiers`.
        """
        return ()

    def country_codes(self) -> FrozenSet[str]:
        """Return the codes of every country listed in `iso3166.tab`."""
        return frozenset(self._country_data)

    def load_timezone_info(self, identifier: str) -> TimezoneInfo:
        """Parse the zone file for `identifier`."""
        canonical = self.valid_timezone_identifier(identifier)
        if canonical is None:
            raise InvalidTimezoneIdentifier(identifier)

        path = os.path.join(self.zoneinfo_dir, *canonical.split('/'))

        try:
            with open(path, 'rb') as f:
                tzinfo = dateutil.tz.tzfile(f, filename=canonical)
        except (OSError, ValueError, struct.error) as e:
            raise InvalidZoneinfoFile(
                f"Unable to read zoneinfo file {path}: {e}",
            ) from e

        return DataTimezoneInfo(canonical, tzinfo)

    def load_country_info(self, code: str) -> CountryInfo:
        """Return the country parsed from the tables for `code`."""
        try:
            return self._country_data[code]
        except KeyError:
            raise InvalidCountryCode(code) from None


def validate_zoneinfo_dir(
    path: str,
    iso3166_tab_path: Optional[str] = None,
) -> Optional[ZoneinfoPaths]:
    """
    Check whether `path` is a usable zoneinfo directory.

    Returns the resolved paths of the directory and its tables, or `None` if
    the directory is unusable. If `iso3166_tab_path` is given, it is used in
    place of the directory's own `iso3166.tab`.
    """
    if not os.path.isdir(path):
        return None

    if iso3166_tab_path is not None:
        if not os.path.isfile(iso3166_tab_path):
            return None
    else:
        iso3166_tab_path = os.path.join(path, ISO3166_TAB)
        if not os.path.isfile(iso3166_tab_path):
            return None

    for zone_tab in ZONE_TABS:
        zone_tab_path = os.path.join(path, zone_tab)
        if os.path.isfile(zone_tab_path):
            return ZoneinfoPaths(path, iso3166_tab_path, zone_tab_path)

    return None


def find_zoneinfo_dir(
    search_path: Iterable[str],
    alternate_iso3166_tab_search_path: Iterable[str] = (),
) -> Optional[ZoneinfoPaths]:
    """Return the paths of the first usable directory on `search_path`."""
    alternate_iso3166_tab_path = next(
        (
            x
            for x in alternate_iso3166_tab_search_path
            if os.path.isfile(x)
        ),
        None,
    )

    for path in search_path:
        paths = validate_zoneinfo_dir(path)

        if paths is None and alternate_iso3166_tab_path is not None:
            paths = validate_zoneinfo_dir(path, alternate_iso3166_tab_path)

        if paths is not None:
            return paths

        logger.debug(f"{path} is not a valid zoneinfo directory")

    return None


def _invalid_directory_message(
    path: str,
    alternate_iso3166_tab_path: Optional[str],
) -> str:
    zone_tabs = ' or '.join(ZONE_TABS)

    if alternate_iso3166_tab_path is not None:
        return (
            f"{path} is not a directory or doesn't contain a {zone_tabs} "
            f"file, or {alternate_iso3166_tab_path} is not a file."
        )

    return (
        f"{path} is not a directory or doesn't contain a {ISO3166_TAB} file "
        f"and a {zone_tabs} file."
    )


def _find_timezones(
    root: str,
    parts: Tuple[str, ...] = (),
) -> Iterator[str]:
    directory = os.path.join(root, *parts)

    for entry in os.listdir(directory):
        if '.' in entry:
            continue

        if not parts and entry in EXCLUDED_FILENAMES:
            continue

        try:
            entry.encode('utf-8')
        except UnicodeEncodeError:
            # Undecodable file name
            continue

        full_path = os.path.join(directory, entry)

        if os.path.isdir(full_path):
            yield from _find_timezones(root, parts + (entry,))
        elif os.path.isfile(full_path) and _is_tzif(full_path):
            yield '/'.join(parts + (entry,))


def _is_tzif(path: str) -> bool:
    try:
        with open(path, 'rb') as f:
            return f.read(len(TZIF_MAGIC)) == TZIF_MAGIC
    except OSError:
        return False


def _load_countries(
    iso3166_tab_path: str,
    zone_tab_path: str,
) -> Dict[str, CountryInfo]:
    with open(iso3166_tab_path, 'r', encoding='utf-8') as iso3166_tab:
        with open(zone_tab_path, 'r', encoding='utf-8') as zone_tab:
            return load_countries(iso3166_tab, zone_tab, zone_tab_path)
