"""
Консольный клиент сервисов прогноза погоды.

Команды:
  configure - настроить провайдера (параметры "<name>=<value>" или интерактивно)
  get       - получить погоду через текущего или указанного провайдера
  clear     - удалить настройки провайдеров
  list      - показать доступных провайдеров и их возможности
"""

import argparse
import getpass
import logging
import os
import sys
from configparser import ConfigParser
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type

from dotenv import load_dotenv

from weather_cli import __version__, storage
from weather_cli.dates import NOW, format_date, parse_date
from weather_cli.errors import ConfigError, UnknownProviderError, WeatherError
from weather_cli.providers import Provider, WeatherInfo, WeatherKind
from weather_cli.registry import ProviderRegistry, default_registry

logger = logging.getLogger(__name__)

# Местоположение, для которого проверяется только что введённая конфигурация
DEFAULT_CONFIGURE_LOCATION = "London"
ALL_PROVIDERS = "all"

KIND_NAMES = {
    WeatherKind.CLEAR: "Ясно",
    WeatherKind.CLOUDS: "Облачно",
    WeatherKind.RAIN: "Дождь",
    WeatherKind.SNOW: "Снег",
    WeatherKind.THUNDERSTORM: "Гроза",
    WeatherKind.FOG: "Туман",
    WeatherKind.UNKNOWN: "Неизвестно",
}


def setup_logging(verbose: bool = False) -> None:
    level_name = "DEBUG" if verbose else os.getenv("WEATHER_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ============================================================================
# НАСТРОЙКА ПРОВАЙДЕРОВ
# ============================================================================

def parse_parameters(parameters: Sequence[str]) -> Dict[str, str]:
    """Разобрать аргументы вида "<name>=<value>"."""
    result: Dict[str, str] = {}
    for param in parameters:
        name, sep, value = param.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ConfigError(f"Argument '{param}' cannot be parsed as '<name>=<value>' parameter")
        result[name] = value.strip()
    return result


def prompt_parameters(
    provider_cls: Type[Provider],
    ask: Callable[[str], str] = input,
    ask_secret: Callable[[str], str] = getpass.getpass,
) -> Dict[str, str]:
    """Интерактивно запросить все параметры провайдера."""
    print(f"Настройка провайдера {provider_cls.name}: {provider_cls.description}")
    result: Dict[str, str] = {}
    for param in provider_cls.params:
        prompt = f"{param.name} ({param.id}, {param.description}): "
        value = (ask_secret(prompt) if param.secret else ask(prompt)).strip()
        if not value:
            raise ConfigError(f"Parameter '{param.id}' cannot be empty")
        result[param.id] = value
    return result


def configure_provider(
    registry: ProviderRegistry,
    config: ConfigParser,
    name: str,
    parameters: Sequence[str],
    verify: bool = True,
    ask: Callable[[str], str] = input,
    ask_secret: Callable[[str], str] = getpass.getpass,
) -> None:
    provider_cls = registry.get(name)
    if parameters:
        section = parse_parameters(parameters)
    else:
        section = prompt_parameters(provider_cls, ask, ask_secret)

    provider = provider_cls.from_config(section)
    if verify:
        # Пробный запрос, чтобы убедиться, что конфигурация рабочая
        logger.info("Verifying %s configuration with request for %s", name, DEFAULT_CONFIGURE_LOCATION)
        try:
            provider.get_weather(DEFAULT_CONFIGURE_LOCATION)
        except WeatherError as e:
            raise ConfigError(f"When configuring {name}: {e}") from e

    storage.set_provider_section(config, name, section)
    # Первый настроенный провайдер становится текущим
    if storage.get_current_provider(config) is None:
        storage.set_current_provider(config, name)
    print(f"Провайдер {name} настроен.")


# ============================================================================
# ПОЛУЧЕНИЕ ПОГОДЫ
# ============================================================================

def provider_section(registry: ProviderRegistry, config: ConfigParser, name: str) -> Dict[str, str]:
    """Параметры провайдера из конфигурации; недостающие берутся из переменных <NAME>_<PARAM>."""
    provider_cls = registry.get(name)
    section = storage.get_provider_section(config, name) or {}
    for param in provider_cls.params:
        env_value = os.getenv(f"{name.upper()}_{param.id.upper()}")
        if env_value and not section.get(param.id):
            logger.debug("Using %s.%s from environment", name, param.id)
            section[param.id] = env_value
    if not section:
        raise ConfigError(f"Missing config for provider '{name}'. Run 'weather configure {name}' first")
    return section


def resolve_provider_name(config: ConfigParser, provider: Optional[str], set_default: bool) -> str:
    if provider:
        return provider
    if set_default:
        raise WeatherError("'--set-default' works only together with '--provider'")
    current = storage.get_current_provider(config)
    if current is None:
        raise ConfigError(
            "Active provider not specified. Please use '-p <provider_name> -s' to specify new default one"
        )
    return current


def get_forecast(
    registry: ProviderRegistry,
    config: ConfigParser,
    location: str,
    date_text: str = NOW,
    provider: Optional[str] = None,
    set_default: bool = False,
) -> Tuple[WeatherInfo, bool]:
    """Получить погоду; второй элемент результата - изменилась ли конфигурация."""
    name = resolve_provider_name(config, provider, set_default)
    instance = registry.create(name, provider_section(registry, config, name))
    day = parse_date(date_text)

    logger.debug("Requesting weather for %s on %s via %s", location, day or NOW, name)
    try:
        info = instance.get_weather(location, day)
    except (KeyError, TypeError, IndexError, ValueError, AttributeError) as e:
        raise WeatherError(f"Unexpected response format from provider '{name}': {e!r}") from e

    changed = False
    if set_default and storage.get_current_provider(config) != name:
        storage.set_current_provider(config, name)
        changed = True
    return info, changed


def format_weather(info: WeatherInfo) -> str:
    when = format_date(info.day) if info.day else "сейчас"
    lines = [
        "=" * 60,
        f"Погода в городе - {info.location}, {when}",
        "=" * 60,
        f"  Состояние: {KIND_NAMES[info.kind]}" + (f" ({info.description})" if info.description else ""),
        f"  Температура: {info.temperature:.1f}°C",
        f"  Влажность: {info.humidity:.0f}%",
        f"  Скорость ветра: {info.wind_speed:.1f} м/с",
    ]
    return "\n".join(lines)


# ============================================================================
# ОЧИСТКА И СПИСОК ПРОВАЙДЕРОВ
# ============================================================================

def clear_providers(registry: ProviderRegistry, config: ConfigParser, providers: Sequence[str]) -> List[str]:
    """Удалить настройки провайдеров; пустой список или "all" - удалить все."""
    for name in providers:
        if name != ALL_PROVIDERS and name not in registry:
            raise UnknownProviderError(name)

    if not providers or ALL_PROVIDERS in providers:
        targets = registry.names()
    else:
        targets = list(dict.fromkeys(providers))

    removed = [name for name in targets if storage.remove_provider_section(config, name)]
    storage.drop_dangling_current(config)
    return removed


def list_providers(registry: ProviderRegistry, config: ConfigParser) -> str:
    current = storage.get_current_provider(config)
    configured = set(storage.configured_providers(config))
    lines: List[str] = []
    for name in registry:
        provider_cls = registry.get(name)
        flags = []
        if name in configured:
            flags.append("настроен")
        if name == current:
            flags.append("текущий")
        header = name + (f" [{', '.join(flags)}]" if flags else "")
        lines.append(header)
        lines.append(f"  {provider_cls.description}")
        lines.append(f"  Даты: {provider_cls.date_window()}")
        lines.append("  Параметры:")
        for param in provider_cls.params:
            lines.append(f"    {param.id} - {param.name}: {param.description}")
    return "\n".join(lines)


# ============================================================================
# ТОЧКА ВХОДА
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather",
        description="Консольный клиент сервисов прогноза погоды",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры:
  %(prog)s configure openweather apikey=XXXX
  %(prog)s get London
  %(prog)s get -p weatherapi -d 2024-05-01 -s Washington
  %(prog)s clear all
        """,
    )
    parser.add_argument("-c", "--config", help="Путь к альтернативному файлу настроек (или WEATHER_CONFIG)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Подробный вывод в лог")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    commands = parser.add_subparsers(dest="command", metavar="command")
    commands.required = True

    configure = commands.add_parser("configure", help="Настроить провайдера")
    configure.add_argument("provider", help="Имя провайдера")
    configure.add_argument(
        "parameters", nargs="*", help='Параметры "<name>=<value>"; без параметров - интерактивный режим'
    )
    configure.add_argument(
        "--no-verify", action="store_true", help="Не проверять настройки пробным запросом"
    )

    get = commands.add_parser("get", help="Получить погоду")
    get.add_argument("location", nargs="+", help="Населённый пункт")
    get.add_argument(
        "-d", "--date", default=NOW, help='Дата: "YYYY-MM-DD", "today", "tomorrow" или "now" (по умолчанию)'
    )
    get.add_argument("-p", "--provider", help="Использовать указанного провайдера вместо текущего")
    get.add_argument(
        "-s", "--set-default", action="store_true", help="Сделать провайдера из --provider текущим"
    )

    clear = commands.add_parser("clear", help="Удалить настройки провайдеров")
    clear.add_argument("providers", nargs="*", help='Имена провайдеров; "all" или пусто - все')

    commands.add_parser("list", help="Показать доступных провайдеров")
    return parser


def run(args: argparse.Namespace, registry: ProviderRegistry, config: ConfigParser) -> bool:
    """Выполнить команду; вернуть True, если конфигурацию нужно сохранить."""
    if args.command == "configure":
        configure_provider(registry, config, args.provider, args.parameters, verify=not args.no_verify)
        return True

    if args.command == "get":
        info, changed = get_forecast(
            registry, config, " ".join(args.location), args.date, args.provider, args.set_default
        )
        print(format_weather(info))
        return changed

    if args.command == "clear":
        removed = clear_providers(registry, config, args.providers)
        if removed:
            print(f"Удалены настройки: {', '.join(removed)}")
        else:
            print("Нечего удалять.")
        return bool(removed)

    if args.command == "list":
        print(list_providers(registry, config))
        return False

    raise WeatherError(f"Unknown command: {args.command}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config_path = os.path.expanduser(args.config) if args.config else storage.default_config_path()
        config = storage.load_config(config_path)
        if run(args, default_registry(), config):
            storage.save_config(config, config_path)
    except WeatherError as e:
        print(f"Ошибка: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nПрервано.", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
