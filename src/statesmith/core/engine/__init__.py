# src/statesmith/core/engine/__init__.py
"""
Engine de aplicação do Statesmith.

Componentes principais:
    - executor → aplicação sequencial com force/dry-run/filtros e política de falhas
    - batch    → aplicação concorrente limitada, com prazo único para o lote
    - types    → ExecutionResult, ExecutionSummary, ExecutionReport

Invariantes:
    - Cada item é aplicado no máximo uma vez por run
    - Falhas por item nunca abortam o lote, exceto as classificadas como críticas
"""

from .batch import BATCH_TIMEOUT, BatchApplier
from .executor import Executor
from .types import ALREADY_SATISFIED, WOULD_APPLY, ExecutionReport, ExecutionResult, ExecutionSummary

__all__ = [
    "BATCH_TIMEOUT",
    "BatchApplier",
    "Executor",
    "ALREADY_SATISFIED",
    "WOULD_APPLY",
    "ExecutionReport",
    "ExecutionResult",
    "ExecutionSummary",
]
