"""Exceptions raised when loading timezone and country data."""


class InvalidTimezoneIdentifier(ValueError):
    """Raised for a timezone identifier unknown to the data source."""


class InvalidCountryCode(ValueError):
    """Raised for a country code unknown to the data source."""


class InvalidDataSource(NotImplementedError):
    """Raised when a data source method has not been overridden."""


class InvalidZoneinfoFile(ValueError):
    """Raised when a file in a zoneinfo directory cannot be read."""


class ConfigError(ValueError):
    """Represents an invalid data source selection or configuration file."""


class RequiredDependencyMissing(Exception):
    """The data a data source depends on could not be located."""


class InvalidZoneinfoDirectory(Exception):
    """An explicitly given zoneinfo directory is not usable."""


class ZoneinfoDirectoryNotFound(Exception):
    """No directory on the zoneinfo search path is usable."""


class DataSourceNotFound(Exception):
    """No source of timezone data could be detected."""
