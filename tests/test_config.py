from pathlib import Path

import pytest

from invoxis.config import AppConfig


def test_defaults_without_environment() -> None:
    config = AppConfig.from_env({})
    assert config.debug is False
    assert config.host == "0.0.0.0"
    assert config.port == 8000
    assert config.storage_secret == "invoxis-dev-secret"
    assert config.data_dir == Path("./data")
    assert config.export_dir is None
    assert config.log_dir == Path("./data/logs")


def test_values_read_from_environment() -> None:
    config = AppConfig.from_env(
        {
            "INVOXIS_DEBUG": "yes",
            "INVOXIS_HOST": " 127.0.0.1 ",
            "INVOXIS_PORT": "9100",
            "INVOXIS_STORAGE_SECRET": "s3cret",
            "INVOXIS_DATA_DIR": "/srv/invoxis",
        }
    )
    assert config.debug is True
    assert config.host == "127.0.0.1"
    assert config.port == 9100
    assert config.storage_secret == "s3cret"
    assert config.export_dir is None
    assert config.log_dir == Path("/srv/invoxis/logs")


def test_export_dir_can_be_set_separately() -> None:
    config = AppConfig.from_env({"INVOXIS_EXPORT_DIR": "/tmp/pdfs"})
    assert config.export_dir == Path("/tmp/pdfs")


@pytest.mark.parametrize("value", ["abc", "0", "70000"])
def test_bad_port_is_rejected(value: str) -> None:
    with pytest.raises(ValueError):
        AppConfig.from_env({"INVOXIS_PORT": value})


@pytest.mark.parametrize("value", ["", "0", "false", "off"])
def test_debug_flag_is_off_for_other_values(value: str) -> None:
    assert AppConfig.from_env({"INVOXIS_DEBUG": value}).debug is False


def test_blank_export_dir_disables_disk_copies() -> None:
    assert AppConfig.from_env({"INVOXIS_EXPORT_DIR": "  "}).export_dir is None
