# src/statesmith/core/resource/__init__.py
"""
Contratos canônicos de Resource do Statesmith.

## Componentes

- **types**: `ResourceType`, `ApplyOutcome`, `StateSnapshot`
- **base**: `Resource` (Protocol) e `BaseResource`
- **registry**: `ResourceRegistry` (fábricas por tipo)

## Invariantes

- Todo Resource possui `name` e `type` não vazios
- `test()` e `get_current_state()` são somente-leitura
- `apply()` é idempotente
"""

from .types import ApplyOutcome, ResourceType, StateSnapshot
from .base import BaseResource, Resource
from .registry import DuplicateResourceTypeError, ResourceRegistry

__all__ = [
    "ApplyOutcome",
    "ResourceType",
    "StateSnapshot",
    "BaseResource",
    "Resource",
    "DuplicateResourceTypeError",
    "ResourceRegistry",
]
