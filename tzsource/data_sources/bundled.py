"""Data source backed by the zoneinfo tarball bundled with `dateutil`."""

import io
import json
import logging
import tarfile
import posixpath
import importlib.resources
from typing import Dict, Tuple, Optional, FrozenSet

import dateutil.tz
import dateutil.zoneinfo

from tzsource.info import (
    CountryInfo,
    TimezoneInfo,
    DataTimezoneInfo,
    LinkedTimezoneInfo,
)
from tzsource.exceptions import (
    InvalidCountryCode,
    RequiredDependencyMissing,
    InvalidTimezoneIdentifier,
)
from tzsource.data_source import DataSource
from tzsource.data_sources.tables import (
    ZONE_TABS,
    ISO3166_TAB,
    load_countries,
)

logger = logging.getLogger(__name__)

# Ships the country tables which the dateutil tarball leaves out
TZDATA_PACKAGE = 'tzdata.zoneinfo'


class BundledDataSource(DataSource):
    """
    Loads timezone data from the tarball distributed inside `dateutil`.

    The tarball contains compiled zoneinfo files only. Countries are read
    from the `iso3166.tab` and zone tables of the `tzdata` package.
    """

    def __init__(self) -> None:
        super().__init__()

        # `dateutil.zoneinfo` isn't present in the typeshed
        stream = dateutil.zoneinfo.getzoneinfofile_stream()  # type: ignore
        if stream is None:
            raise RequiredDependencyMissing(
                "The zoneinfo tarball bundled with dateutil could not be "
                "found.",
            )

        self._zone_data: Dict[str, bytes] = {}
        self._links: Dict[str, str] = {}
        self.tzdata_version: Optional[str] = None

        with tarfile.open(fileobj=stream) as tf:
            for member in tf.getmembers():
                if member.name == dateutil.zoneinfo.METADATA_FN:
                    self.tzdata_version = _read_version(tf, member)
                elif member.islnk():
                    self._links[member.name] = member.linkname
                elif member.issym():
                    self._links[member.name] = posixpath.normpath(
                        posixpath.join(
                            posixpath.dirname(member.name),
                            member.linkname,
                        ),
                    )
                elif member.isfile():
                    self._zone_data[member.name] = (
                        tf.extractfile(member).read()  # type: ignore
                    )

        if not self._zone_data:
            raise RequiredDependencyMissing(
                "The zoneinfo tarball bundled with dateutil contains no "
                "timezones.",
            )

        dangling = [
            name
            for name in self._links
            if _resolve_link(name, self._links, self._zone_data) is None
        ]
        for name in dangling:
            logger.warning(
                f"Ignoring {name}, a link to the missing timezone "
                f"{self._links[name]}",
            )
            del self._links[name]

        self._country_data = _load_tzdata_countries()

        logger.debug(
            f"Loaded {len(self._zone_data)} zones and {len(self._links)} "
            f"links from the dateutil tarball, and "
            f"{len(self._country_data)} countries from {TZDATA_PACKAGE}",
        )

    def __str__(self) -> str:
        return f"Bundled DataSource: {self.tzdata_version or 'unknown'}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.tzdata_version or 'unknown'}>"

    def data_timezone_identifiers(self) -> Tuple[str, ...]:
        """Return the sorted names of the zone files in the tarball."""
        return tuple(sorted(self._zone_data))

    def linked_timezone_identifiers(self) -> Tuple[str, ...]:
        """Return the sorted names of the links in the tarball."""
        return tuple(sorted(self._links))

    def country_codes(self) -> FrozenSet[str]:
        return frozenset(self._country_data)

    def load_timezone_info(self, identifier: str) -> TimezoneInfo:
        """Parse the zone file for `identifier` or resolve its link."""
        try:
            data = self._zone_data[identifier]
        except KeyError:
            pass
        else:
            return DataTimezoneInfo(
                identifier,
                dateutil.tz.tzfile(io.BytesIO(data), filename=identifier),
            )

        try:
            target = self._links[identifier]
        except KeyError:
            raise InvalidTimezoneIdentifier(identifier) from None

        return LinkedTimezoneInfo(identifier, self.get_timezone_info(target))

    def load_country_info(self, code: str) -> CountryInfo:
        try:
            return self._country_data[code]
        except KeyError:
            raise InvalidCountryCode(code) from None


def _read_version(
    tf: tarfile.TarFile,
    member: tarfile.TarInfo,
) -> Optional[str]:
    metadata = json.loads(
        tf.extractfile(member).read().decode('utf-8'),  # type: ignore
    )
    return metadata.get('tzversion')


def _resolve_link(
    name: str,
    links: Dict[str, str],
    zone_data: Dict[str, bytes],
) -> Optional[str]:
    seen = set()

    while name in links:
        if name in seen:
            # Cycle
            return None
        seen.add(name)
        name = links[name]

    return name if name in zone_data else None


def _load_tzdata_countries() -> Dict[str, CountryInfo]:
    try:
        tables = importlib.resources.files(TZDATA_PACKAGE)
    except ModuleNotFoundError:
        raise RequiredDependencyMissing(
            f"The {TZDATA_PACKAGE} package, which provides country data, "
            f"is not installed.",
        ) from None

    iso3166_tab = tables / ISO3166_TAB
    zone_tab = next(
        (tables / x for x in ZONE_TABS if (tables / x).is_file()),
        None,
    )

    if zone_tab is None or not iso3166_tab.is_file():
        raise RequiredDependencyMissing(
            f"The {TZDATA_PACKAGE} package doesn't contain a {ISO3166_TAB} "
            f"file and a {' or '.join(ZONE_TABS)} file.",
        )

    return load_countries(
        iso3166_tab.read_text(encoding='utf-8').splitlines(),
        zone_tab.read_text(encoding='utf-8').splitlines(),
        f'{TZDATA_PACKAGE}/{zone_tab.name}',
    )
