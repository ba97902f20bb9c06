import os
import contextlib
from pathlib import Path
from unittest import mock

import pytest
import layer_loader

from tzsource.config import (
    Config,
    ConfigError,
    ZoneinfoConfig,
    DataSourceConfig,
    yaml_load,
    load_config,
    load_search_path,
)
from tzsource.data_sources import (
    DEFAULT_SEARCH_PATH,
    DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH,
)

TEST_DATA = Path(__file__).parents[3] / 'test_data'

DEFAULT_ZONEINFO_CONFIG = ZoneinfoConfig(
    search_path=DEFAULT_SEARCH_PATH,
    alternate_iso3166_tab_search_path=(
        DEFAULT_ALTERNATE_ISO3166_TAB_SEARCH_PATH
    ),
)


def reset_environment():
    return mock.patch.dict(os.environ, {}, clear=True)


def yaml_data(name: str):
    with (TEST_DATA / f'{name}.yaml').open() as f:
        return yaml_load(f)


@contextlib.contextmanager
def assert_config_error(message: str):
    with pytest.raises(ConfigError) as excinfo:
        yield
    assert str(excinfo.value) == message


def test_trivial_config():
    with reset_environment():
        assert load_config(yaml_data('trivial')) == Config(
            data_source=None,
            zoneinfo=DEFAULT_ZONEINFO_CONFIG,
        )


def test_empty_config():
    with reset_environment():
        assert load_config(None) == Config(
            data_source=None,
            zoneinfo=DEFAULT_ZONEINFO_CONFIG,
        )


def test_zoneinfo_config():
    with reset_environment():
        assert load_config(yaml_data('zoneinfo')) == Config(
            data_source=DataSourceConfig(
                type='zoneinfo',
                args=('/usr/share/zoneinfo', '/usr/share/misc/iso3166.tab'),
            ),
            zoneinfo=DEFAULT_ZONEINFO_CONFIG,
        )


def test_zoneinfo_search_config():
    with reset_environment():
        assert load_config(yaml_data('zoneinfo_search')) == Config(
            data_source=DataSourceConfig(type='zoneinfo', args=()),
            zoneinfo=ZoneinfoConfig(
                search_path=('/opt/zoneinfo', '/usr/share/zoneinfo'),
                alternate_iso3166_tab_search_path=('/opt/misc/iso3166.tab',),
            ),
        )


def test_bundled_config():
    with reset_environment():
        config = load_config(yaml_data('bundled'))
    assert config.data_source == DataSourceConfig(type='bundled', args=())


def test_custom_data_source_config():
    with reset_environment():
        config = load_config(yaml_data('custom'))
    assert config.data_source == DataSourceConfig(
        type='mypackage.sources:CustomDataSource',
        args=('https://example.com/tzdata',),
    )


def test_layered_config():
    with contextlib.ExitStack() as stack:
        files = [
            stack.enter_context((TEST_DATA / f'{name}.yaml').open())
            for name in ('override', 'zoneinfo')
        ]
        data = layer_loader.load_files(files, loader=yaml_load)

    with reset_environment():
        config = load_config(data)

    assert config.data_source == DataSourceConfig(
        type='zoneinfo',
        args=('/etc/zoneinfo', '/usr/share/misc/iso3166.tab'),
    )


def test_search_path_from_environment():
    search_path = os.pathsep.join(('/opt/zoneinfo', '', '/etc/zoneinfo'))
    with mock.patch.dict(os.environ, {'TZSOURCE_ZONEINFO_PATH': search_path}):
        config = load_config(yaml_data('trivial'))

    assert config.zoneinfo.search_path == ('/opt/zoneinfo', '/etc/zoneinfo')


def test_search_path_config_overrides_environment():
    with mock.patch.dict(os.environ, {'TZSOURCE_ZONEINFO_PATH': '/etc/zi'}):
        config = load_config(yaml_data('zoneinfo_search'))

    assert config.zoneinfo.search_path == (
        '/opt/zoneinfo',
        '/usr/share/zoneinfo',
    )


def test_search_path_default():
    with reset_environment():
        assert load_search_path() == DEFAULT_SEARCH_PATH


def test_search_path_environment_without_paths():
    with mock.patch.dict(os.environ, {'TZSOURCE_ZONEINFO_PATH': os.pathsep}):
        with assert_config_error("TZSOURCE_ZONEINFO_PATH contains no paths."):
            load_search_path()


@pytest.mark.parametrize('name', (
    'invalid_unknown_key',
    'invalid_no_type',
    'invalid_search_path',
))
def test_schema_violations(name):
    with reset_environment():
        with pytest.raises(ConfigError) as excinfo:
            load_config(yaml_data(name))

    assert str(excinfo.value).startswith(
        "Could not validate config file against schema",
    )


def test_iso3166_table_requires_directory():
    with assert_config_error(
        "`iso3166_table` may only be given together with `directory`.",
    ):
        load_config(yaml_data('invalid_iso3166_without_directory'))


def test_directory_only_for_zoneinfo():
    with assert_config_error(
        "`directory` and `iso3166_table` are only valid for the zoneinfo "
        "data source, not bundled.",
    ):
        load_config(yaml_data('invalid_directory_for_bundled'))


def test_args_not_for_zoneinfo():
    with assert_config_error(
        "The zoneinfo data source is configured with `directory` and "
        "`iso3166_table`, not `args`.",
    ):
        load_config(yaml_data('invalid_args_for_zoneinfo'))
