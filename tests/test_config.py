from pathlib import Path

import pytest

from urbit_api import config as config_mod
from urbit_api.config import (
    ENV_SHIP_CODE,
    ENV_SHIP_URL,
    ConfigError,
    get_ship_code,
    get_ship_url,
    load_config,
)


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch) -> None:
    monkeypatch.delenv(ENV_SHIP_URL, raising=False)
    monkeypatch.delenv(ENV_SHIP_CODE, raising=False)


class TestLoadConfig:
    def test_load_from_explicit_path(self, tmp_path: Path) -> None:
        config_file = tmp_path / "urbit.toml"
        config_file.write_text('url = "http://0.0.0.0:8080"\ncode = "abc"')

        config, path = load_config(config_file)

        assert config == {"url": "http://0.0.0.0:8080", "code": "abc"}
        assert path == config_file

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="No ship config"):
            load_config(tmp_path / "nonexistent.toml")

    def test_malformed_toml_raises(self, tmp_path: Path) -> None:
        bad_file = tmp_path / "bad.toml"
        bad_file.write_text("invalid = [unclosed")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(bad_file)

    def test_path_exists_but_is_directory(self, tmp_path: Path) -> None:
        dir_path = tmp_path / "config_dir"
        dir_path.mkdir()

        with pytest.raises(ConfigError, match="Cannot read ship config"):
            load_config(dir_path)

    def test_discovers_local_config(self, tmp_path: Path, monkeypatch) -> None:
        local = tmp_path / ".urbit" / "urbit.toml"
        local.parent.mkdir()
        local.write_text('url = "http://local:8080"')
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(config_mod, "HOME_CONFIG_PATH", tmp_path / "home.toml")

        config, path = load_config()

        assert config["url"] == "http://local:8080"
        assert path == local

    def test_no_config_anywhere(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(config_mod, "HOME_CONFIG_PATH", tmp_path / "home.toml")

        assert load_config() == ({}, None)


class TestShipSettings:
    def test_env_takes_precedence(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv(ENV_SHIP_URL, " http://env:8080 ")
        monkeypatch.setenv(ENV_SHIP_CODE, "env-code")
        config = {"url": "http://file:8080", "code": "file-code"}

        assert get_ship_url(config, tmp_path / "urbit.toml") == "http://env:8080"
        assert get_ship_code(config, tmp_path / "urbit.toml") == "env-code"

    def test_falls_back_to_file(self, tmp_path: Path) -> None:
        config = {"url": "http://file:8080/", "code": "file-code"}

        assert get_ship_url(config, tmp_path / "urbit.toml") == "http://file:8080"
        assert get_ship_code(config, tmp_path / "urbit.toml") == "file-code"

    def test_missing_code(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match=ENV_SHIP_CODE):
            get_ship_code({}, tmp_path / "urbit.toml")

    def test_missing_url_without_file(self) -> None:
        with pytest.raises(ConfigError, match="Missing ship URL"):
            get_ship_url({}, None)

    @pytest.mark.parametrize("value", ["", "   ", 42, None])
    def test_invalid_value(self, tmp_path: Path, value) -> None:
        with pytest.raises(ConfigError, match="expected a non-empty string"):
            get_ship_url({"url": value}, tmp_path / "urbit.toml")
