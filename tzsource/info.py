"""Metadata records returned by data sources."""

import datetime
from typing import Tuple, Optional
from fractions import Fraction

from dataclasses import field, dataclass


@dataclass(frozen=True)
class TimezoneInfo:
    """
    Represents a timezone defined by a data source.

    Records are shared between the data source cache and every caller that
    looks them up, so they are never mutated once constructed.
    """
    identifier: str

    def __post_init__(self) -> None:
        if self.identifier is None:
            raise ValueError("identifier must not be None")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.identifier}>"

    def create_timezone(self) -> datetime.tzinfo:
        """Construct the `tzinfo` for the timezone this record describes."""
        raise NotImplementedError("Subclasses must override create_timezone")


@dataclass(frozen=True, repr=False)
class DataTimezoneInfo(TimezoneInfo):
    """A timezone whose transitions are defined directly by data."""
    tzinfo: datetime.tzinfo = field(compare=False)

    def create_timezone(self) -> datetime.tzinfo:
        """Return the parsed `tzinfo` for this timezone."""
        return self.tzinfo


@dataclass(frozen=True, repr=False)
class LinkedTimezoneInfo(TimezoneInfo):
    """A timezone that is an alias for another timezone."""
    link_to: TimezoneInfo

    @property
    def link_to_identifier(self) -> str:
        """The identifier of the timezone this one links to."""
        return self.link_to.identifier

    def create_timezone(self) -> datetime.tzinfo:
        """Create the timezone of the link target."""
        return self.link_to.create_timezone()


@dataclass(frozen=True)
class CountryTimezone:
    """A timezone observed within a country, with its location."""
    identifier: str
    latitude: Fraction
    longitude: Fraction
    description: Optional[str] = None

    def description_or_friendly_identifier(self) -> str:
        """
        Return the description, or a name derived from the identifier.

        `America/New_York` becomes `New York`.
        """
        if self.description:
            return self.description
        return self.identifier.rsplit('/', 1)[-1].replace('_', ' ')


@dataclass(frozen=True)
class CountryInfo:
    """Represents a country and the timezones it observes."""
    code: str
    name: str
    zones: Tuple[CountryTimezone, ...] = ()

    def __post_init__(self) -> None:
        if self.code is None:
            raise ValueError("code must not be None")
        if self.name is None:
            raise ValueError("name must not be None")
        # Accept any iterable of zones but always store a tuple
        object.__setattr__(self, 'zones', tuple(self.zones))

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.code}>"

    @property
    def zone_identifiers(self) -> Tuple[str, ...]:
        """The identifiers of the timezones observed in this country."""
        return tuple(x.identifier for x in self.zones)
