import sys

import pytest

from weather_cli import storage
from weather_cli.errors import ConfigError


def test_missing_file_gives_empty_config(tmp_path):
    config = storage.load_config(str(tmp_path / "absent.ini"))
    assert config.sections() == []
    assert storage.get_current_provider(config) is None


def test_directory_path_is_rejected(tmp_path):
    with pytest.raises(ConfigError) as exc:
        storage.load_config(str(tmp_path))
    assert "points not to file" in str(exc.value)


def test_malformed_file_is_rejected(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("apikey = no section header\n", encoding="utf-8")
    with pytest.raises(ConfigError) as exc:
        storage.load_config(str(path))
    assert "When parsing config file" in str(exc.value)


def test_save_and_load(tmp_path):
    path = str(tmp_path / "nested" / "dir" / "config.ini")
    config = storage.new_config()
    storage.set_provider_section(config, "weatherapi", {"apikey": "w%key"})
    storage.set_provider_section(config, "openweather", {"apikey": "AbC"})
    storage.set_current_provider(config, "weatherapi")
    storage.save_config(config, path)

    with open(path, encoding="utf-8") as f:
        text = f.read()
    # Общая секция первой, затем провайдеры по алфавиту
    assert text.index("[weather]") < text.index("[openweather]") < text.index("[weatherapi]")

    loaded = storage.load_config(path)
    assert storage.get_current_provider(loaded) == "weatherapi"
    assert storage.get_provider_section(loaded, "openweather") == {"apikey": "AbC"}
    assert storage.get_provider_section(loaded, "weatherapi") == {"apikey": "w%key"}
    assert storage.configured_providers(loaded) == ["openweather", "weatherapi"]


def test_empty_sections_are_not_written(tmp_path):
    path = tmp_path / "config.ini"
    config = storage.new_config()
    storage.set_current_provider(config, "openweather")
    storage.set_current_provider(config, None)
    storage.save_config(config, str(path))
    assert path.read_text(encoding="utf-8").strip() == ""


def test_comments_are_accepted(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("# settings\n[weather]\ncurrent = accuweather\n\n[accuweather]\napikey = k\n", encoding="utf-8")
    config = storage.load_config(str(path))
    assert storage.get_current_provider(config) == "accuweather"


def test_global_section_is_not_a_provider():
    config = storage.new_config()
    with pytest.raises(ConfigError):
        storage.set_provider_section(config, storage.GLOBAL_SECTION, {"apikey": "x"})
    storage.set_current_provider(config, "openweather")
    assert storage.get_provider_section(config, storage.GLOBAL_SECTION) is None
    assert storage.remove_provider_section(config, storage.GLOBAL_SECTION) is False


def test_drop_dangling_current():
    config = storage.new_config()
    storage.set_provider_section(config, "openweather", {"apikey": "k"})
    storage.set_current_provider(config, "openweather")

    storage.drop_dangling_current(config)
    assert storage.get_current_provider(config) == "openweather"

    storage.remove_provider_section(config, "openweather")
    storage.drop_dangling_current(config)
    assert storage.get_current_provider(config) is None


def test_config_path_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("WEATHER_CONFIG", str(tmp_path / "custom.ini"))
    assert storage.default_config_path() == str(tmp_path / "custom.ini")


@pytest.mark.skipif(sys.platform.startswith("win"), reason="XDG layout")
def test_config_path_in_xdg_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert storage.default_config_path() == str(tmp_path / "weather-cli" / "config.ini")
