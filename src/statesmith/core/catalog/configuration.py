# src/statesmith/core/catalog/configuration.py
"""
Configuration — agregado ordenado de Resources.

Este módulo define a `Configuration`, a estrutura canônica consumida pelo
Validator (somente leitura) e pelo Executor (aplicação).

Decisões arquiteturais:
    - Itens são registrados um a um, preservando a ordem de declaração
    - Nomes duplicados são rejeitados no momento do `add` (sem sobrescrita)
    - A ordem de registro é mantida separadamente da estrutura de armazenamento

Invariantes:
    - Cada item possui `name` único dentro da Configuration
    - `items` reflete exatamente a ordem de registro
    - Um `add` rejeitado não altera a contagem de itens

Limites explícitos:
    - Não valida estado do sistema (ver core.validation)
    - Não aplica itens (ver core.engine)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from statesmith.core.exceptions import DuplicateNameError
from statesmith.core.resource import Resource
from statesmith.core.settings.hashing import compute_hash


@dataclass
class Configuration:
    """
    Agregado nomeado e ordenado de Resources com metadados.

    Campos:
        - name, version, description: identidade declarada
        - metadata: mapa livre (ex.: fontes, categoria, origem do Bridge)
    """

    name: str
    version: str = ""
    description: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    _items: Dict[str, Resource] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def add(self, item: Resource) -> None:
        item_name = getattr(item, "name", None)
        if not isinstance(item_name, str) or not item_name.strip():
            raise ValueError("item.name must be a non-empty string")

        if item_name in self._items:
            raise DuplicateNameError(
                f"Duplicate item name: {item_name}",
                details={"item": item_name, "configuration": self.name},
                hint="Renomeie um dos itens ou remova a declaração repetida.",
            )

        self._items[item_name] = item
        self._order.append(item_name)

    def get(self, name: str) -> Optional[Resource]:
        return self._items.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    @property
    def items(self) -> List[Resource]:
        return [self._items[n] for n in self._order]

    def enabled_items(self) -> List[Resource]:
        return [i for i in self.items if getattr(i, "enabled", True)]

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "metadata": dict(self.metadata),
            "items": [
                {
                    "name": i.name,
                    "type": i.type,
                    "description": getattr(i, "description", ""),
                    "enabled": bool(getattr(i, "enabled", True)),
                    "properties": dict(getattr(i, "properties", {}) or {}),
                }
                for i in self.items
            ],
        }

    def content_hash(self) -> str:
        return compute_hash(self.to_dict())
