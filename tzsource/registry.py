"""Selection of the data source used by the process."""

import inspect
import logging
import importlib
import threading
from typing import Any, Tuple, Union, Iterable, Optional, Sequence

from tzsource.config import Config
from tzsource.exceptions import (
    ConfigError,
    DataSourceNotFound,
    RequiredDependencyMissing,
    ZoneinfoDirectoryNotFound,
)
from tzsource.data_source import DataSource
from tzsource.data_sources import (
    BundledDataSource,
    ZoneinfoDataSource,
    DEFAULT_SEARCH_PATH,
    DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH,
)

logger = logging.getLogger(__name__)

BUNDLED = 'bundled'
ZONEINFO = 'zoneinfo'

DataSourceOrType = Union[DataSource, str]


def create_data_source(
    data_source_or_type: DataSourceOrType,
    *args: Any,
    search_path: Iterable[str] = DEFAULT_SEARCH_PATH,
    alternate_iso3166_tab_search_path: Iterable[str] = (
        DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH
    ),
) -> DataSource:
    """
    Construct the data source described by `data_source_or_type`.

    Accepts a `DataSource` instance (returned as is), `'bundled'` for the data
    bundled with `dateutil`, `'zoneinfo'` for a zoneinfo directory optionally
    followed by the directory and the path of an alternate `iso3166.tab`, or
    a `<module-path>:<class-name>` path to a `DataSource` subclass which is
    instantiated with `args`.

    Raises `ConfigError` for anything else, or for the wrong number of
    arguments, before any data source is constructed.
    """
    if isinstance(data_source_or_type, DataSource):
        _check_arity('a DataSource instance', args, maximum=0)
        return data_source_or_type

    if not isinstance(data_source_or_type, str):
        raise ConfigError(_invalid_selection_message())

    if data_source_or_type == BUNDLED:
        _check_arity(BUNDLED, args, maximum=0)
        return BundledDataSource()

    if data_source_or_type == ZONEINFO:
        _check_arity(ZONEINFO, args, maximum=2)
        return ZoneinfoDataSource(
            *args,
            search_path=search_path,
            alternate_iso3166_tab_search_path=(
                alternate_iso3166_tab_search_path
            ),
        )

    if ':' in data_source_or_type:
        return _import_data_source(data_source_or_type, args)

    raise ConfigError(_invalid_selection_message())


class DataSourceRegistry:
    """
    Holds the data source in use.

    The data source is either set explicitly with `set`, or detected the first
    time `get` is called. Detection prefers the data bundled with `dateutil`
    and falls back to the first valid zoneinfo directory on `search_path`.
    """

    def __init__(
        self,
        search_path: Iterable[str] = DEFAULT_SEARCH_PATH,
        alternate_iso3166_tab_search_path: Iterable[str] = (
            DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH
        ),
    ) -> None:
        self.search_path: Sequence[str] = tuple(search_path)
        self.alternate_iso3166_tab_search_path: Sequence[str] = tuple(
            alternate_iso3166_tab_search_path,
        )
        self._lock = threading.RLock()
        self._data_source: Optional[DataSource] = None

    def get(self) -> DataSource:
        """
        Return the data source in use, detecting one if none has been set.

        Raises `DataSourceNotFound` if nothing has been set and no data source
        could be detected. Detection is retried on the next call.
        """
        with self._lock:
            if self._data_source is None:
                self._data_source = self._detect_data_source()
            return self._data_source

    def set(self, data_source_or_type: DataSourceOrType, *args: Any) -> None:
        """
        Replace the data source in use.

        See `create_data_source` for the accepted arguments. If construction
        fails, the data source in use is left unchanged.
        """
        data_source = create_data_source(
            data_source_or_type,
            *args,
            search_path=self.search_path,
            alternate_iso3166_tab_search_path=(
                self.alternate_iso3166_tab_search_path
            ),
        )

        with self._lock:
            self._data_source = data_source

        logger.info(f"Using {data_source}")

    def reset(self) -> None:
        """Forget the data source in use, so that the next `get` detects."""
        with self._lock:
            self._data_source = None

    def _detect_data_source(self) -> DataSource:
        try:
            data_source: DataSource = BundledDataSource()
        except RequiredDependencyMissing as e:
            logger.debug(f"Bundled data source unavailable: {e}")
        else:
            logger.info(f"Detected {data_source}")
            return data_source

        try:
            data_source = ZoneinfoDataSource(
                search_path=self.search_path,
                alternate_iso3166_tab_search_path=(
                    self.alternate_iso3166_tab_search_path
                ),
            )
        except ZoneinfoDirectoryNotFound:
            raise DataSourceNotFound(
                "No source of timezone data could be found. Install "
                "python-dateutil with its bundled zoneinfo tarball or add a "
                "directory containing zoneinfo files to the search path "
                f"({', '.join(self.search_path) or 'empty'}).",
            ) from None

        logger.info(f"Detected {data_source}")
        return data_source


def registry_for_config(config: Config) -> DataSourceRegistry:
    """Build a registry, and set its data source, from configuration."""
    registry = DataSourceRegistry(
        search_path=config.zoneinfo.search_path,
        alternate_iso3166_tab_search_path=(
            config.zoneinfo.alternate_iso3166_tab_search_path
        ),
    )

    if config.data_source is not None:
        registry.set(config.data_source.type, *config.data_source.args)

    return registry


default_registry = DataSourceRegistry()


def get_data_source() -> DataSource:
    """Return the data source in use by the default registry."""
    return default_registry.get()


def set_data_source(data_source_or_type: DataSourceOrType, *args: Any) -> None:
    """Replace the data source in use by the default registry."""
    default_registry.set(data_source_or_type, *args)


def _invalid_selection_message() -> str:
    return (
        "data_source_or_type must be a DataSource instance or a data source "
        f"type ({BUNDLED} or {ZONEINFO})"
    )


def _check_arity(name: str, args: Tuple[Any, ...], *, maximum: int) -> None:
    if len(args) > maximum:
        raise ConfigError(
            f"{name} accepts at most {maximum} argument(s), {len(args)} given",
        )


def _import_data_source(
    dotted_path: str,
    args: Tuple[Any, ...],
) -> DataSource:
    module_path, klass_name = dotted_path.rsplit(':', 1)

    try:
        module = importlib.import_module(module_path)
    except ImportError:
        raise ConfigError(
            f"{module_path} does not exist on the PYTHONPATH",
        ) from None

    try:
        klass = getattr(module, klass_name)
    except AttributeError:
        raise ConfigError(
            f"{klass_name} does not exist in module {module_path}",
        ) from None

    if not (isinstance(klass, type) and issubclass(klass, DataSource)):
        raise ConfigError(
            f"{dotted_path} must be a subclass of tzsource.DataSource",
        )

    try:
        inspect.signature(klass).bind(*args)
    except TypeError:
        raise ConfigError(
            f"Could not instantiate data source, {klass_name} does not accept "
            f"{len(args)} argument(s).",
        ) from None

    return klass(*args)
