"""Хранение настроек провайдеров в INI-файле.

Формат файла::

    [weather]
    current = openweather

    [openweather]
    apikey = ...

Секция `[weather]` содержит общие настройки, остальные секции - параметры
провайдеров. Все значения хранятся строками.
"""

import configparser
import logging
import os
import sys
from typing import Dict, List, Optional

from weather_cli.errors import ConfigError

logger = logging.getLogger(__name__)

APP_DIR = "weather-cli"
CONFIG_FILE = "config.ini"
HOME_CONFIG_FILE = ".weather-cli.ini"

GLOBAL_SECTION = "weather"
CURRENT_KEY = "current"


def new_config() -> configparser.ConfigParser:
    config = configparser.ConfigParser(interpolation=None, default_section="__defaults__")
    # Сохраняем регистр ключей
    config.optionxform = str
    return config


def user_config_dir() -> Optional[str]:
    if sys.platform.startswith("win"):
        return os.getenv("APPDATA") or None
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return xdg
    home = os.path.expanduser("~")
    if home == "~":
        return None
    return os.path.join(home, ".config")


def default_config_path() -> str:
    """Путь к файлу настроек: $WEATHER_CONFIG, каталог настроек пользователя или домашний каталог."""
    env_path = os.getenv("WEATHER_CONFIG")
    if env_path:
        return os.path.expanduser(env_path)

    config_dir = user_config_dir()
    if config_dir:
        return os.path.join(config_dir, APP_DIR, CONFIG_FILE)

    home = os.path.expanduser("~")
    if home == "~":
        raise ConfigError(
            "Current OS doesn't seem to have notion of either user's config directory "
            "or user's home directory. Please use explicit '--config' argument"
        )
    return os.path.join(home, HOME_CONFIG_FILE)


def load_config(path: str) -> configparser.ConfigParser:
    config = new_config()
    if not os.path.exists(path):
        logger.debug("Config file %s does not exist, starting with empty config", path)
        return config
    if not os.path.isfile(path):
        raise ConfigError(f"Path '{path}' exists yet points not to file")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config.read_file(f, source=path)
    except OSError as e:
        raise ConfigError(f"When reading config file '{path}': {e}") from e
    except configparser.Error as e:
        raise ConfigError(f"When parsing config file '{path}': {e}") from e

    logger.debug("Loaded config from %s: sections %s", path, config.sections())
    return config


def save_config(config: configparser.ConfigParser, path: str) -> None:
    # Общая секция первой, провайдеры - по алфавиту, пустые секции не пишем
    ordered = new_config()
    names = sorted(config.sections(), key=lambda name: (name != GLOBAL_SECTION, name))
    for name in names:
        items = sorted(config.items(name, raw=True))
        if not items:
            continue
        ordered.add_section(name)
        for key, value in items:
            ordered.set(name, key, value)

    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            ordered.write(f)
    except OSError as e:
        raise ConfigError(f"When writing configuration to '{path}': {e}") from e

    logger.debug("Saved config to %s", path)


def get_current_provider(config: configparser.ConfigParser) -> Optional[str]:
    value = config.get(GLOBAL_SECTION, CURRENT_KEY, fallback="").strip()
    return value or None


def set_current_provider(config: configparser.ConfigParser, name: Optional[str]) -> None:
    if name is None:
        if config.has_section(GLOBAL_SECTION):
            config.remove_option(GLOBAL_SECTION, CURRENT_KEY)
        return
    if not config.has_section(GLOBAL_SECTION):
        config.add_section(GLOBAL_SECTION)
    config.set(GLOBAL_SECTION, CURRENT_KEY, name)


def configured_providers(config: configparser.ConfigParser) -> List[str]:
    return sorted(name for name in config.sections() if name != GLOBAL_SECTION)


def get_provider_section(config: configparser.ConfigParser, name: str) -> Optional[Dict[str, str]]:
    if name == GLOBAL_SECTION or not config.has_section(name):
        return None
    return dict(config.items(name, raw=True))


def set_provider_section(config: configparser.ConfigParser, name: str, params: Dict[str, str]) -> None:
    if name == GLOBAL_SECTION:
        raise ConfigError(f"'{GLOBAL_SECTION}' is reserved and cannot be used as provider name")
    if config.has_section(name):
        config.remove_section(name)
    config.add_section(name)
    for key, value in params.items():
        config.set(name, key, value)


def remove_provider_section(config: configparser.ConfigParser, name: str) -> bool:
    if name == GLOBAL_SECTION:
        return False
    return config.remove_section(name)


def drop_dangling_current(config: configparser.ConfigParser) -> None:
    """Убрать текущего провайдера, если его секция больше не существует."""
    current = get_current_provider(config)
    if current is not None and get_provider_section(config, current) is None:
        logger.debug("Current provider %s is no longer configured", current)
        set_current_provider(config, None)
