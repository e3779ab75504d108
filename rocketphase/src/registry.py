"""
Name-to-factory registries for runtime-selectable models.

Registries are ordinary objects: build one, register factories, and pass
it to whatever constructs models from configuration.
"""

from typing import Callable, Dict, List

from .config import ConfigurationError


class ModelRegistry:
    """Maps configuration names to model factories for one model family."""

    def __init__(self, family: str):
        self.family = family
        self._factories: Dict[str, Callable] = {}

    def register(self, name: str, factory: Callable):
        if name in self._factories:
            raise ValueError(f"{self.family} model '{name}' is already registered")
        self._factories[name] = factory

    def names(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def create(self, name: str, *args, **kwargs):
        """Construct the model registered under name."""
        try:
            factory = self._factories[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown {self.family} model '{name}'. Valid models: {self.names()}") from None
        return factory(*args, **kwargs)
