# src/statesmith/core/resource/base.py
"""
Contrato canônico de Resource do Statesmith.

Um Resource é a menor unidade declarativa do engine: um item de
configuração com estado desejado e três operações.

Contrato:
    - test() -> bool: verificação somente-leitura e repetível do estado
      desejado; retorna False em estado ambíguo/inacessível em vez de levantar
    - apply() -> ApplyOutcome: ação de convergência idempotente
    - get_current_state() -> StateSnapshot: snapshot somente-leitura usado
      para diff Before/After; nunca levanta para "não configurado"

Princípios fundamentais:
    - Resources não conhecem o Validator nem o Executor
    - Conformidade é garantida por duck typing (@runtime_checkable)
    - Identidade (name/type) é imutável após a criação
    - `properties` é exposto somente-leitura

Limites explícitos:
    - Não define procedimentos específicos de SO ou gerenciadores de pacote
    - Não decide políticas de execução (force, dry-run)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from .types import ApplyOutcome, StateSnapshot


@runtime_checkable
class Resource(Protocol):
    """
    Contrato canônico de um Resource.

    Atributos obrigatórios:
        - name: identificador único dentro da Configuration
        - type: discriminador da variante (ver `ResourceType`)
        - enabled: itens desabilitados não são aplicados
        - description: texto livre
        - properties: mapa somente-leitura de campos específicos do tipo
    """
    name: str
    type: str
    enabled: bool
    description: str
    properties: Mapping[str, Any]

    def test(self) -> bool:
        """Retorna True se o estado atual já corresponde ao desejado."""
        ...

    def apply(self) -> ApplyOutcome:
        """Converge o estado atual para o desejado (idempotente)."""
        ...

    def get_current_state(self) -> StateSnapshot:
        """Retorna um snapshot opaco e comparável do estado observável."""
        ...


class BaseResource(ABC):
    """
    Base abstrata opcional para implementações de Resource.

    Mantém identidade imutável e `properties` somente-leitura. Subclasses
    implementam `test`, `apply` e `get_current_state`; uma subclasse que
    omita qualquer um deles falha já na construção (TypeError).

    Decisões arquiteturais:
        - `name` e `type` são validados na construção (não vazios)
        - `properties` é copiado e exposto via MappingProxyType
        - Atribuição a name/type após a construção é rejeitada
    """

    __slots__ = ("_name", "_type", "enabled", "description", "_properties")

    def __init__(
        self,
        *,
        name: str,
        type: str,
        enabled: bool = True,
        description: str = "",
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("resource.name must be a non-empty string")
        if not isinstance(type, str) or not type.strip():
            raise ValueError("resource.type must be a non-empty string")
        self._name = name
        self._type = type
        self.enabled = bool(enabled)
        self.description = description or ""
        self._properties = MappingProxyType(dict(properties or {}))

    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> str:
        return self._type

    @property
    def properties(self) -> Mapping[str, Any]:
        return self._properties

    def prop(self, key: str, default: Any = None) -> Any:
        return self._properties.get(key, default)

    def require(self, key: str) -> Any:
        if key not in self._properties:
            raise KeyError(f"Resource '{self.name}' ({self.type}) requires property '{key}'")
        return self._properties[key]

    def to_declaration(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "enabled": self.enabled,
            "properties": dict(self._properties),
        }

    @abstractmethod
    def test(self) -> bool:
        """Verificação somente-leitura do estado desejado."""

    @abstractmethod
    def apply(self) -> ApplyOutcome:
        """Convergência idempotente para o estado desejado."""

    @abstractmethod
    def get_current_state(self) -> StateSnapshot:
        """Snapshot observável usado no diff Before/After."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, type={self.type!r}, enabled={self.enabled})"
