from __future__ import annotations

import os
import tomllib
from pathlib import Path

# Environment variable names, checked before the config file
ENV_SHIP_URL = "URBIT_SHIP_URL"
ENV_SHIP_CODE = "URBIT_SHIP_CODE"

LOCAL_CONFIG_NAME = Path(".urbit") / "urbit.toml"
HOME_CONFIG_PATH = Path.home() / ".urbit" / "urbit.toml"


class ConfigError(RuntimeError):
    pass


def _candidate_paths() -> list[Path]:
    # dict keeps order and drops the home path when run from ~
    return list(dict.fromkeys([Path.cwd() / LOCAL_CONFIG_NAME, HOME_CONFIG_PATH]))


def _read_ship_config(cfg_path: Path) -> dict:
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"No ship config at {cfg_path}.") from None
    except OSError as e:
        raise ConfigError(f"Cannot read ship config {cfg_path}: {e}") from e
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in ship config {cfg_path}: {e}") from None


def load_config(path: str | Path | None = None) -> tuple[dict, Path | None]:
    """Load the ship config.

    With no explicit path, the local and home candidates are tried in order;
    finding neither is not an error since the environment may carry
    everything.
    """
    if path:
        cfg_path = Path(path).expanduser()
        return _read_ship_config(cfg_path), cfg_path

    for candidate in _candidate_paths():
        if candidate.is_file():
            return _read_ship_config(candidate), candidate
    return {}, None


def _describe(config_path: Path | None) -> str:
    if config_path is None:
        return str(HOME_CONFIG_PATH)
    return str(config_path)


def _get_string(
    config: dict, config_path: Path | None, *, key: str, env: str, label: str
) -> str:
    env_value = os.environ.get(env)
    if env_value and env_value.strip():
        return env_value.strip()

    try:
        value = config[key]
    except KeyError:
        raise ConfigError(
            f"Missing {label}. Set {env} environment variable "
            f"or add `{key}` to {_describe(config_path)}."
        ) from None

    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"Invalid `{key}` in {_describe(config_path)}; "
            "expected a non-empty string."
        )
    return value.strip()


def get_ship_url(config: dict, config_path: Path | None) -> str:
    """Get the ship URL from environment variable or config file.

    Environment variable URBIT_SHIP_URL takes precedence over config file.
    A trailing slash is dropped so request paths can be appended as is.
    """
    url = _get_string(
        config, config_path, key="url", env=ENV_SHIP_URL, label="ship URL"
    )
    return url.rstrip("/")


def get_ship_code(config: dict, config_path: Path | None) -> str:
    """Get the ship's ``+code`` from environment variable or config file."""
    return _get_string(
        config, config_path, key="code", env=ENV_SHIP_CODE, label="ship code"
    )
