# src/statesmith/resources/__init__.py
"""
Resources embutidos do Statesmith.

Implementações genéricas do contrato de Resource. Procedimentos específicos
de SO (pacotes, feature toggles, drivers) são colaboradores externos que se
registram no `ResourceRegistry`; até lá, seus tipos resolvem para
`UnboundResource`.
"""

from statesmith.core.resource import ResourceRegistry, ResourceType

from .command import CommandResource
from .json_settings import JsonSettingsResource
from .memory import InMemoryResource, memory_factory
from .unbound import UnboundResource


def default_registry() -> ResourceRegistry:
    """Registry com os tipos embutidos; tipos desconhecidos → UnboundResource."""
    registry = ResourceRegistry(fallback=UnboundResource)
    registry.register(ResourceType.JSON_SETTINGS.value, JsonSettingsResource)
    registry.register(ResourceType.TERMINAL_SETTINGS.value, JsonSettingsResource)
    registry.register(ResourceType.PROFILE_SETTINGS.value, JsonSettingsResource)
    registry.register(ResourceType.COMMAND.value, CommandResource)
    return registry


__all__ = [
    "CommandResource",
    "JsonSettingsResource",
    "InMemoryResource",
    "memory_factory",
    "UnboundResource",
    "default_registry",
]
