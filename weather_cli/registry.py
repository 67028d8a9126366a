import logging
from typing import Dict, Iterator, List, Optional, Type

from weather_cli.errors import UnknownProviderError
from weather_cli.providers import AccuWeather, OpenWeather, Provider, WeatherApi

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Соответствие имени провайдера и его класса; перечисляется в алфавитном порядке."""

    def __init__(self) -> None:
        self._providers: Dict[str, Type[Provider]] = {}

    def register(self, provider_cls: Type[Provider], name: Optional[str] = None) -> None:
        name = name or provider_cls.name
        if not name:
            raise ValueError(f"Provider {provider_cls.__name__} has no name")
        # Повторная регистрация - ошибка программиста, а не пользователя
        if name in self._providers:
            raise ValueError(f"Provider {name} already registered")
        self._providers[name] = provider_cls

    def get(self, name: str) -> Type[Provider]:
        try:
            return self._providers[name]
        except KeyError:
            raise UnknownProviderError(name) from None

    def create(self, name: str, section: Dict[str, str]) -> Provider:
        provider_cls = self.get(name)
        logger.debug("Creating provider %s", name)
        return provider_cls.from_config(section)

    def names(self) -> List[str]:
        return sorted(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._providers)


def default_registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register(AccuWeather)
    registry.register(OpenWeather)
    registry.register(WeatherApi)
    return registry
