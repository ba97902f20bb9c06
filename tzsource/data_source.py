"""Base class for sources of timezone and country data."""

import heapq
import bisect
import threading
from typing import Any, Dict, Tuple, TypeVar, Callable, Optional, FrozenSet

from tzsource.info import CountryInfo, TimezoneInfo
from tzsource.exceptions import InvalidDataSource

T = TypeVar('T')


class DataSource:
    """
    Base class for sources of timezone and country data.

    Subclasses override `data_timezone_identifiers`,
    `linked_timezone_identifiers`, `country_codes`, `load_timezone_info` and
    `load_country_info`. The remaining methods are built on top of these and
    cache their results for the lifetime of the instance.

    Lookups are safe to perform from several threads. The loaders are called
    outside the instance lock, so threads racing on the same unseen key may
    each call the loader, but only the first record stored is ever returned.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timezones: Dict[str, TimezoneInfo] = {}
        self._countries: Dict[str, CountryInfo] = {}
        self._data_identifiers: Optional[Tuple[str, ...]] = None
        self._linked_identifiers: Optional[Tuple[str, ...]] = None
        self._all_identifiers: Optional[Tuple[str, ...]] = None

    def __str__(self) -> str:
        return "Default DataSource"

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"

    def get_timezone_info(self, identifier: str) -> TimezoneInfo:
        """
        Return the `TimezoneInfo` for the given identifier.

        Raises `InvalidTimezoneIdentifier` if the identifier is not known.
        Failures are not cached; looking up the same bad identifier again will
        query the underlying data once more.
        """
        return self._cached_load(
            self._timezones,
            identifier,
            self.load_timezone_info,
        )

    def get_country_info(self, code: str) -> CountryInfo:
        """
        Return the `CountryInfo` for the given ISO 3166-1 alpha-2 code.

        Raises `InvalidCountryCode` if the code is not known.
        """
        return self._cached_load(self._countries, code, self.load_country_info)

    def timezone_identifiers(self) -> Tuple[str, ...]:
        """
        Return a sorted tuple of every supported timezone identifier.

        This includes both data and linked identifiers. The result is computed
        once and the same tuple is returned on every subsequent call.
        """
        if self._all_identifiers is None:
            data = self._cached_data_identifiers()
            linked = self._cached_linked_identifiers()

            if linked:
                combined = tuple(heapq.merge(data, linked))
            else:
                combined = data

            with self._lock:
                if self._all_identifiers is None:
                    self._all_identifiers = combined

        return self._all_identifiers

    def valid_timezone_identifier(self, candidate: Any) -> Optional[str]:
        """
        Check whether `candidate` is a supported timezone identifier.

        Returns the instance of the identifier held by this data source, or
        `None` if `candidate` is not a string or is not supported. Matching is
        exact and case sensitive.
        """
        if not isinstance(candidate, str):
            return None

        identifiers = self.timezone_identifiers()
        index = bisect.bisect_left(identifiers, candidate)

        if index < len(identifiers) and identifiers[index] == candidate:
            return identifiers[index]

        return None

    def data_timezone_identifiers(self) -> Tuple[str, ...]:
        """
        Return the sorted identifiers of timezones defined by data.

        Must not overlap with `linked_timezone_identifiers`.
        """
        raise InvalidDataSource("data_timezone_identifiers not defined")

    def linked_timezone_identifiers(self) -> Tuple[str, ...]:
        """Return the sorted identifiers of timezones defined as links."""
        raise InvalidDataSource("linked_timezone_identifiers not defined")

    def country_codes(self) -> FrozenSet[str]:
        """Return every supported ISO 3166-1 alpha-2 country code."""
        raise InvalidDataSource("country_codes not defined")

    def load_timezone_info(self, identifier: str) -> TimezoneInfo:
        """
        Load the `TimezoneInfo` for an identifier, bypassing the cache.

        Raises `InvalidTimezoneIdentifier` if the identifier is not known.
        """
        raise InvalidDataSource("load_timezone_info not defined")

    def load_country_info(self, code: str) -> CountryInfo:
        """
        Load the `CountryInfo` for a country code, bypassing the cache.

        Raises `InvalidCountryCode` if the code is not known.
        """
        raise InvalidDataSource("load_country_info not defined")

    def _cached_load(
        self,
        cache: Dict[str, T],
        key: str,
        loader: Callable[[str], T],
    ) -> T:
        try:
            return cache[key]
        except KeyError:
            pass

        value = loader(key)

        with self._lock:
            return cache.setdefault(key, value)

    def _cached_data_identifiers(self) -> Tuple[str, ...]:
        if self._data_identifiers is None:
            identifiers = self.data_timezone_identifiers()
            with self._lock:
                if self._data_identifiers is None:
                    self._data_identifiers = identifiers
        return self._data_identifiers

    def _cached_linked_identifiers(self) -> Tuple[str, ...]:
        if self._linked_identifiers is None:
            identifiers = self.linked_timezone_identifiers()
            with self._lock:
                if self._linked_identifiers is None:
                    self._linked_identifiers = identifiers
        return self._linked_identifiers
