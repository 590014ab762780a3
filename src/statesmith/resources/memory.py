# src/statesmith/resources/memory.py
"""
Resource em memória, apoiado por um dicionário compartilhado.

Usado em dry-runs, em testes e como referência mínima do contrato:
o estado desejado é `properties["value"]` sob a chave
`properties.get("key", name)` do store.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Mapping, MutableMapping, Optional

from statesmith.core.resource import ApplyOutcome, BaseResource, StateSnapshot


_ABSENT = object()


class InMemoryResource(BaseResource):

    __slots__ = ("store",)

    def __init__(
        self,
        *,
        store: Optional[MutableMapping[str, Any]] = None,
        name: str,
        type: str,
        enabled: bool = True,
        description: str = "",
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(
            name=name,
            type=type,
            enabled=enabled,
            description=description,
            properties=properties,
        )
        self.store: MutableMapping[str, Any] = store if store is not None else {}

    @property
    def key(self) -> str:
        return str(self.prop("key", self.name))

    def test(self) -> bool:
        return self.store.get(self.key, _ABSENT) == self.prop("value")

    def apply(self) -> ApplyOutcome:
        if self.test():
            return ApplyOutcome.unchanged("already in desired state")
        self.store[self.key] = deepcopy(self.prop("value"))
        return ApplyOutcome(
            changed=True,
            restart_required=bool(self.prop("restart_required", False)),
            message=f"set {self.key}",
        )

    def get_current_state(self) -> StateSnapshot:
        value = self.store.get(self.key, _ABSENT)
        if value is _ABSENT:
            return {"key": self.key, "present": False}
        return {"key": self.key, "present": True, "value": deepcopy(value)}


def memory_factory(store: Dict[str, Any]):
    """Retorna uma fábrica de `InMemoryResource` ligada a `store`."""

    def _factory(**kwargs: Any) -> InMemoryResource:
        return InMemoryResource(store=store, **kwargs)

    return _factory
