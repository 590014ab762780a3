# src/statesmith/core/resource/registry.py
"""
Registro de fábricas de Resource por tipo.

Este módulo define o `ResourceRegistry`, que associa cada valor do
discriminador `type` a uma fábrica capaz de construir o Resource concreto
a partir de uma declaração normalizada.

Decisões arquiteturais:
    - A busca por tipo é case-insensitive
    - Tipos sem fábrica registrada recorrem à fábrica de fallback
    - Registrar o mesmo tipo duas vezes é erro estrutural
    - A ordem de registro é preservada para inspeção

Limites explícitos:
    - Não faz parse de arquivos (ver core.catalog.parser)
    - Não executa recursos
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from .base import Resource


ResourceFactory = Callable[..., Resource]


class DuplicateResourceTypeError(ValueError):
    """
    Exceção levantada quando uma fábrica é registrada para um tipo já
    presente no registry.

    Limites explícitos:
        - Não substitui a fábrica existente silenciosamente
    """


@dataclass
class ResourceRegistry:
    """
    Registro canônico de fábricas de Resource.

    Uma fábrica recebe os argumentos nomeados `name`, `type`, `enabled`,
    `description` e `properties` e retorna um objeto que satisfaz o
    protocolo `Resource`.
    """

    fallback: Optional[ResourceFactory] = None
    _factories: Dict[str, ResourceFactory] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def register(self, resource_type: str, factory: ResourceFactory) -> None:
        if not isinstance(resource_type, str) or not resource_type.strip():
            raise ValueError("resource type must be a non-empty string")

        key = resource_type.lower()
        if key in self._factories:
            raise DuplicateResourceTypeError(f"Duplicate resource type: {resource_type}")

        self._factories[key] = factory
        self._order.append(resource_type)

    def has(self, resource_type: str) -> bool:
        return resource_type.lower() in self._factories

    def types(self) -> List[str]:
        return list(self._order)

    def create(
        self,
        *,
        name: str,
        type: str,
        enabled: bool = True,
        description: str = "",
        properties: Optional[Mapping[str, Any]] = None,
    ) -> Resource:
        factory = self._factories.get(type.lower(), self.fallback)
        if factory is None:
            raise KeyError(f"No resource factory registered for type '{type}'")
        return factory(
            name=name,
            type=type,
            enabled=enabled,
            description=description,
            properties=dict(properties or {}),
        )
