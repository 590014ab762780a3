# src/statesmith/core/engine/types.py
"""
Tipos canônicos de resultado do Executor.

Componentes principais:
    - ExecutionResult  → resultado imutável de um item
    - ExecutionSummary → agregados calculados a partir da lista real de resultados
    - ExecutionReport  → resultados ordenados + summary de um run

Invariantes:
    - Estruturas frozen; coleções são tuplas
    - Contagens do summary nunca divergem da lista de resultados
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple


ALREADY_SATISFIED = "already satisfied"
WOULD_APPLY = "would apply"


@dataclass(frozen=True)
class ExecutionResult:
    """
    Resultado da execução de um item.

    Campos:
        - changes: {"before": ..., "after": ...} quando houve apply real
        - duration: segundos
        - error: ErrorPayload serializado quando `success` é False
    """

    item_name: str
    item_type: str
    success: bool
    message: str
    changes: Optional[Dict[str, Any]] = None
    duration: float = 0.0
    error: Optional[Dict[str, Any]] = None
    applied: bool = False
    restart_required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_name": self.item_name,
            "item_type": self.item_type,
            "success": self.success,
            "message": self.message,
            "changes": self.changes,
            "duration": self.duration,
            "error": self.error,
            "applied": self.applied,
            "restart_required": self.restart_required,
        }


@dataclass(frozen=True)
class ExecutionSummary:
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    filtered: int = 0
    already_satisfied: int = 0
    applied: int = 0
    would_apply: int = 0
    restart_required: int = 0
    total_duration: float = 0.0
    average_duration: float = 0.0
    throughput: float = 0.0

    @classmethod
    def from_results(
        cls,
        results: Sequence[ExecutionResult],
        *,
        skipped: int = 0,
        filtered: int = 0,
        wall_time: Optional[float] = None,
    ) -> "ExecutionSummary":
        """Calcula o summary a partir da lista de resultados; throughput em itens/segundo."""
        total = len(results)
        total_duration = sum(r.duration for r in results)
        elapsed = total_duration if wall_time is None else wall_time
        return cls(
            total=total,
            succeeded=sum(1 for r in results if r.success),
            failed=sum(1 for r in results if not r.success),
            skipped=skipped,
            filtered=filtered,
            already_satisfied=sum(1 for r in results if r.success and r.message == ALREADY_SATISFIED),
            applied=sum(1 for r in results if r.applied),
            would_apply=sum(1 for r in results if r.message == WOULD_APPLY),
            restart_required=sum(1 for r in results if r.restart_required),
            total_duration=total_duration,
            average_duration=total_duration / total if total else 0.0,
            throughput=total / elapsed if total and elapsed > 0 else 0.0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass(frozen=True)
class ExecutionReport:
    configuration_name: str
    results: Tuple[ExecutionResult, ...]
    summary: ExecutionSummary
    dry_run: bool = False
    force: bool = False

    @property
    def success(self) -> bool:
        return self.summary.failed == 0

    def result_for(self, name: str) -> Optional[ExecutionResult]:
        return next((r for r in self.results if r.item_name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "configuration_name": self.configuration_name,
            "dry_run": self.dry_run,
            "force": self.force,
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary.to_dict(),
        }
