# src/statesmith/core/engine/executor.py
"""
Executor do Statesmith.

Aplica os itens habilitados de uma Configuration em ordem de declaração.

Fluxo por item:
    1. Sem `force`: `test()`; já satisfeito → sucesso "already satisfied", sem apply
    2. Dry-run → "would apply", nenhuma ação
    3. Live → snapshot before, `apply()`, snapshot after

Política de falhas:
    - Exceções por item são capturadas em ExecutionResult (ErrorPayload) e o lote continua
    - Falhas `ErrorKind.CRITICAL` (CriticalError) abortam o run e são relançadas

Itens desabilitados não entram na lista de resultados (contados em `skipped`);
itens fora dos filtros de tipo também não (contados em `filtered`).

Registro no RunManifest:
    - Escritas no manifest são serializadas por um lock do Executor
    - Um item abandonado (`abandon`, usado no timeout do BatchApplier) não
      tem mais resultado registrado; o desfecho tardio vai só para o log
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from statesmith.core.context import RunContext
from statesmith.core.errors import exception_to_error
from statesmith.core.exceptions import is_critical
from statesmith.core.resource import ApplyOutcome
from statesmith.core.settings import EngineSettings, ExecutionSettings
from statesmith.core.traceability import RunManifest, item_failed, item_finished, item_started

from .types import ALREADY_SATISFIED, WOULD_APPLY, ExecutionReport, ExecutionResult, ExecutionSummary


SCOPE = "executor"


class Executor:
    """Executor sequencial de Configurations."""

    def __init__(
        self,
        settings: Optional[ExecutionSettings] = None,
        *,
        ctx: Optional[RunContext] = None,
        manifest: Optional[RunManifest] = None,
    ) -> None:
        self.settings = settings or ExecutionSettings()
        self.ctx = ctx
        self.manifest = manifest
        self._lock = threading.Lock()
        self._abandoned: Set[str] = set()
        self._settled: Set[str] = set()

    @classmethod
    def from_settings(cls, settings: EngineSettings, **kwargs: Any) -> "Executor":
        return cls(settings.execution, **kwargs)

    def _log(self, level: str, message: str, *, scope: str = SCOPE, **extra: Any) -> None:
        if self.ctx is not None:
            self.ctx.log(scope=scope, level=level, message=message, **extra)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _settle(self, name: str, record: Callable[[RunManifest], None]) -> bool:
        with self._lock:
            if name in self._abandoned:
                return False
            self._settled.add(name)
            if self.manifest is not None:
                record(self.manifest)
            return True

    def abandon(self, name: str, error: Dict[str, Any]) -> bool:
        """
        Encerra o registro de um item que ainda está rodando.

        O item passa a constar como falho com `error` no manifest e qualquer
        resultado posterior do worker é descartado.

        Returns:
            False quando o item já tinha resultado registrado (nada muda).
        """
        with self._lock:
            if name in self._settled:
                return False
            self._abandoned.add(name)
            if self.manifest is not None:
                item_failed(self.manifest, item=name, ts=self._now(), error=error)
            return True

    # ------------------------------------------------------------------
    # Item
    # ------------------------------------------------------------------
    def execute_item(self, resource: Any, *, dry_run: bool = False, force: bool = False) -> ExecutionResult:
        """
        Executa um único item e retorna seu resultado.

        Raises:
            CriticalError: (ou qualquer exceção `ErrorKind.CRITICAL`) relançada após registro.
        """
        name, item_type = resource.name, str(resource.type)
        start = time.perf_counter()
        with self._lock:
            self._abandoned.discard(name)
            self._settled.discard(name)
            if self.manifest is not None:
                item_started(self.manifest, item=name, item_type=item_type, ts=self._now())

        try:
            result = self._converge(resource, name=name, item_type=item_type, dry_run=dry_run, force=force, start=start)
        except Exception as e:
            payload = exception_to_error(e, item=name)
            recorded = self._settle(
                name, lambda m: item_failed(m, item=name, ts=self._now(), error=payload.to_dict())
            )

            if is_critical(e):
                self._log("CRITICAL", "critical failure, aborting run", scope=name, error=payload.to_dict())
                raise

            if not recorded:
                self._log("WARNING", "late failure after abandon, not recorded", scope=name, error=payload.to_dict())
            else:
                self._log("ERROR", payload.message, scope=name, error=payload.to_dict())
            return ExecutionResult(
                item_name=name,
                item_type=item_type,
                success=False,
                message=payload.message,
                duration=time.perf_counter() - start,
                error=payload.to_dict(),
            )

        if not self._settle(name, lambda m: item_finished(m, item=name, ts=self._now(), result=result.to_dict())):
            self._log("WARNING", "late result after abandon, not recorded", scope=name, message=result.message)
            return result
        self._log("INFO", result.message, scope=name, duration=result.duration, applied=result.applied)
        return result

    def _converge(
        self, resource: Any, *, name: str, item_type: str, dry_run: bool, force: bool, start: float
    ) -> ExecutionResult:
        if not force and resource.test():
            return ExecutionResult(
                item_name=name,
                item_type=item_type,
                success=True,
                message=ALREADY_SATISFIED,
                duration=time.perf_counter() - start,
            )

        if dry_run:
            return ExecutionResult(
                item_name=name,
                item_type=item_type,
                success=True,
                message=WOULD_APPLY,
                duration=time.perf_counter() - start,
            )

        before = resource.get_current_state()
        outcome = resource.apply()
        if not isinstance(outcome, ApplyOutcome):
            outcome = ApplyOutcome()
        after = resource.get_current_state()

        return ExecutionResult(
            item_name=name,
            item_type=item_type,
            success=True,
            message=outcome.message or ("applied" if outcome.changed else "no change"),
            changes={"before": before, "after": after},
            duration=time.perf_counter() - start,
            applied=True,
            restart_required=outcome.restart_required,
        )

    # ------------------------------------------------------------------
    # Seleção
    # ------------------------------------------------------------------
    def select(
        self,
        items: Iterable[Any],
        *,
        include_types: Optional[Iterable[str]] = None,
        exclude_types: Optional[Iterable[str]] = None,
    ) -> Tuple[List[Any], int, int]:
        """Retorna (selecionados, desabilitados, filtrados), preservando a ordem de declaração."""
        rules = self.settings
        if include_types is not None or exclude_types is not None:
            rules = ExecutionSettings(
                include_types=tuple(include_types if include_types is not None else rules.include_types),
                exclude_types=tuple(exclude_types if exclude_types is not None else rules.exclude_types),
            )

        selected: List[Any] = []
        disabled = filtered = 0
        for item in items:
            if not item.enabled:
                disabled += 1
            elif not rules.selects(str(item.type)):
                filtered += 1
            else:
                selected.append(item)
        return selected, disabled, filtered

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    def execute(
        self,
        configuration: Any,
        *,
        dry_run: Optional[bool] = None,
        force: Optional[bool] = None,
        include_types: Optional[Iterable[str]] = None,
        exclude_types: Optional[Iterable[str]] = None,
    ) -> ExecutionReport:
        dry = self.settings.dry_run if dry_run is None else dry_run
        forced = self.settings.force if force is None else force

        selected, disabled, filtered = self.select(
            configuration.items, include_types=include_types, exclude_types=exclude_types
        )
        self._log(
            "INFO",
            "execution started",
            configuration=configuration.name,
            selected=len(selected),
            skipped=disabled,
            filtered=filtered,
            dry_run=dry,
            force=forced,
        )

        started = time.perf_counter()
        results = [self.execute_item(item, dry_run=dry, force=forced) for item in selected]

        summary = ExecutionSummary.from_results(
            results, skipped=disabled, filtered=filtered, wall_time=time.perf_counter() - started
        )
        self._log(
            "INFO" if summary.failed == 0 else "WARNING",
            "execution finished",
            configuration=configuration.name,
            succeeded=summary.succeeded,
            failed=summary.failed,
        )
        return ExecutionReport(
            configuration_name=configuration.name,
            results=tuple(results),
            summary=summary,
            dry_run=dry,
            force=forced,
        )
