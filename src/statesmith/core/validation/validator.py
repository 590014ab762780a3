# src/statesmith/core/validation/validator.py
"""
Validator do Statesmith.

O Validator avalia uma Configuration sem alterar o sistema e produz um
`ValidationResult` imutável. Estágios, em ordem:

    1. Estrutural: name, version, ≥1 item, nomes únicos, name/type não vazios.
       Falha → INVALID imediato; estágios seguintes não executam.
    2. Teste por item (`test()`), cada chamada isolada com prazo.
       Modo sequencial ou paralelo (pool limitado por `throttle`).
       Falha sistêmica do modo paralelo → fallback sequencial do lote inteiro.
    3. Compatibilidade do sistema (opcional)
    4. Conflitos entre itens (opcional)
    5. Impacto de performance (opcional)

Status global:
    - INVALID se algum item é INVALID, ou compatibilidade/dependências falham
    - VALID_WITH_WARNINGS se algum item é WARNING
    - VALID caso contrário
    - ERROR apenas para falhas internas do próprio Validator (capturadas)

Limites explícitos:
    - Nunca chama `apply()`
    - Não decide política de execução (ver core.engine)
"""

from __future__ import annotations

import time
from concurrent.futures import Executor as PoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import replace
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from statesmith.core.context import RunContext
from statesmith.core.errors import exception_to_error
from statesmith.core.exceptions import ParallelExecutionError, ValidationTimeoutError
from statesmith.core.settings import EngineSettings, ValidationSettings

from .compatibility import PlatformInfo, check_compatibility
from .conflicts import find_conflicts
from .performance import analyze_performance
from .recommendations import build_recommendations
from .timeout import run_with_timeout
from .types import (
    ItemStatus,
    ItemValidationResult,
    ValidationMode,
    ValidationResult,
    ValidationStatus,
)


SCOPE = "validator"

PoolFactory = Callable[[int], PoolExecutor]


def _default_pool(max_workers: int) -> PoolExecutor:
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="statesmith-validate")


def structural_issues(configuration: Any) -> List[str]:
    """Retorna a lista de problemas estruturais (vazia quando a Configuration é bem formada)."""
    issues: List[str] = []
    if not str(getattr(configuration, "name", "") or "").strip():
        issues.append("configuration name is required")
    if not str(getattr(configuration, "version", "") or "").strip():
        issues.append("configuration version is required")

    items = list(getattr(configuration, "items", []) or [])
    if not items:
        issues.append("configuration has no items")

    seen = set()
    for idx, item in enumerate(items):
        name = str(getattr(item, "name", "") or "").strip()
        if not name:
            issues.append(f"item #{idx} has an empty name")
        elif name in seen:
            issues.append(f"duplicate item name: {name}")
        seen.add(name)
        if not str(getattr(item, "type", "") or "").strip():
            issues.append(f"item {name or '#' + str(idx)} has an empty type")
    return issues



def _run_test(resource: Any, timeout_seconds: float) -> bool:
    """
    Executa `resource.test()` com prazo.

    Raises:
        ValidationTimeoutError: o prazo expirou (a chamada presa é abandonada).
        Exception: a exceção levantada pelo próprio `test()`.
    """
    call = run_with_timeout(resource.test, timeout_seconds, name=f"statesmith-test:{resource.name}")
    if call.timed_out:
        raise ValidationTimeoutError(
            "validation timeout",
            details={"timeout_seconds": timeout_seconds},
            hint="Aumente validation.timeout_seconds (5-300) ou investigue o recurso que não responde.",
        )
    if call.error is not None:
        raise call.error
    return bool(call.value)


class Validator:
    """Validador somente-leitura de Configurations."""

    def __init__(
        self,
        settings: Optional[ValidationSettings] = None,
        *,
        ctx: Optional[RunContext] = None,
        pool_factory: Optional[PoolFactory] = None,
        platform_info: Optional[PlatformInfo] = None,
        elevation_check: Optional[Callable[[], bool]] = None,
        weights: Optional[Mapping[str, float]] = None,
    ) -> None:
        self.settings = settings or ValidationSettings()
        self.ctx = ctx
        self._pool_factory = pool_factory or _default_pool
        self._platform_info = platform_info
        self._elevation_check = elevation_check
        self._weights = weights

    @classmethod
    def from_settings(cls, settings: EngineSettings, **kwargs: Any) -> "Validator":
        return cls(settings.validation, **kwargs)

    def _log(self, level: str, message: str, **extra: Any) -> None:
        if self.ctx is not None:
            self.ctx.log(scope=SCOPE, level=level, message=message, **extra)

    # ------------------------------------------------------------------
    # Teste por item
    # ------------------------------------------------------------------
    def _test_item(self, resource: Any, timeout_seconds: float) -> ItemValidationResult:
        name, item_type = resource.name, str(resource.type)

        if not resource.enabled:
            return ItemValidationResult(item_name=name, item_type=item_type, status=ItemStatus.WARNING, issues=("disabled",))

        start = time.perf_counter()
        try:
            satisfied = _run_test(resource, timeout_seconds)
        except ValidationTimeoutError as e:
            return ItemValidationResult(
                item_name=name,
                item_type=item_type,
                status=ItemStatus.INVALID,
                issues=("validation timeout",),
                elapsed=time.perf_counter() - start,
                error=exception_to_error(e, item=name).to_dict(),
            )
        except Exception as e:
            payload = exception_to_error(e, item=name)
            return ItemValidationResult(
                item_name=name,
                item_type=item_type,
                status=ItemStatus.INVALID,
                issues=(f"test failed: {payload.message}",),
                elapsed=time.perf_counter() - start,
                error=payload.to_dict(),
            )
        elapsed = time.perf_counter() - start

        if satisfied:
            return ItemValidationResult(
                item_name=name, item_type=item_type, status=ItemStatus.VALID, elapsed=elapsed, satisfied=True
            )
        return ItemValidationResult(
            item_name=name,
            item_type=item_type,
            status=ItemStatus.WARNING,
            issues=("not in desired state",),
            elapsed=elapsed,
            satisfied=False,
        )

    def _test_sequential(self, resources: Sequence[Any], timeout_seconds: float) -> List[ItemValidationResult]:
        return [self._test_item(r, timeout_seconds) for r in resources]

    def _test_parallel(
        self, resources: Sequence[Any], timeout_seconds: float, throttle: int
    ) -> List[ItemValidationResult]:
        try:
            pool = self._pool_factory(throttle)
        except Exception as e:
            raise ParallelExecutionError(
                "could not start the validation pool",
                details={"reason": str(e), "exception_class": e.__class__.__name__},
            ) from e

        results: List[Optional[ItemValidationResult]] = [None] * len(resources)
        with pool:
            try:
                futures = {pool.submit(self._test_item, r, timeout_seconds): i for i, r in enumerate(resources)}
                for fut in as_completed(futures):
                    results[futures[fut]] = fut.result()
            except ParallelExecutionError:
                raise
            except Exception as e:
                raise ParallelExecutionError(
                    "parallel validation failed",
                    details={"reason": str(e), "exception_class": e.__class__.__name__},
                ) from e

        if any(r is None for r in results):
            raise ParallelExecutionError("parallel validation returned incomplete results")
        return list(results)  # type: ignore[arg-type]

    def _test_items(
        self, resources: Sequence[Any], settings: ValidationSettings
    ) -> Tuple[List[ItemValidationResult], ValidationMode]:
        """
        Testa os itens no modo configurado.

        O fallback sequencial aparece apenas em `mode` e no RunContext: o
        conteúdo do resultado é o mesmo de uma validação sequencial.
        """
        if not settings.parallel:
            return self._test_sequential(resources, settings.timeout_seconds), ValidationMode.SEQUENTIAL

        try:
            results = self._test_parallel(resources, settings.timeout_seconds, settings.throttle)
            return results, ValidationMode.PARALLEL
        except ParallelExecutionError as e:
            if self.ctx is not None:
                self.ctx.add_warning(
                    scope=SCOPE, message=f"parallel validation unavailable, fell back to sequential: {e}"
                )
            return self._test_sequential(resources, settings.timeout_seconds), ValidationMode.FALLBACK

    # ------------------------------------------------------------------
    # API pública
    # ------------------------------------------------------------------
    def validate(
        self,
        configuration: Any,
        *,
        parallel: Optional[bool] = None,
        timeout_seconds: Optional[float] = None,
        throttle: Optional[int] = None,
    ) -> ValidationResult:
        """
        Valida a Configuration e retorna um ValidationResult imutável.

        Overrides por chamada passam pelas mesmas regras de domínio das
        settings (timeout em [5, 300], throttle em [1, 5]).

        Raises:
            SettingsValueError: Override fora do domínio (subclasse de ValueError).
        """
        overrides = {
            k: v
            for k, v in (("parallel", parallel), ("timeout_seconds", timeout_seconds), ("throttle", throttle))
            if v is not None
        }
        settings = replace(self.settings, **overrides) if overrides else self.settings

        name = str(getattr(configuration, "name", "") or "")
        start = time.perf_counter()
        self._log("INFO", "validation started", configuration=name, parallel=settings.parallel)

        try:
            problems = structural_issues(configuration)
            if problems:
                self._log("ERROR", "structural validation failed", configuration=name, issues=problems)
                return ValidationResult(
                    configuration_name=name,
                    overall_status=ValidationStatus.INVALID,
                    issues=tuple(problems),
                    recommendations=("Fix the configuration structure and validate again",),
                    duration=time.perf_counter() - start,
                )

            resources = list(configuration.items)
            item_results, mode = self._test_items(resources, settings)
            issues: List[str] = []
            for r in item_results:
                self._log(
                    "INFO" if r.status == ItemStatus.VALID else "WARNING",
                    "item validated",
                    item=r.item_name,
                    status=r.status.value,
                    issues=list(r.issues),
                )

            compatibility = None
            if settings.check_compatibility:
                compatibility = check_compatibility(
                    resources, platform_info=self._platform_info, elevation_check=self._elevation_check
                )
                issues.extend(compatibility.reasons)

            conflicts: tuple = ()
            dependencies_valid = None
            if settings.check_dependencies:
                report = find_conflicts(resources)
                conflicts = report.conflicts
                dependencies_valid = report.valid
                issues.extend(f"conflict: {c.describe()}" for c in conflicts)

            performance = analyze_performance(resources, self._weights) if settings.analyze_performance else None

            statuses = {r.status for r in item_results}
            if (
                ItemStatus.INVALID in statuses
                or (compatibility is not None and not compatibility.compatible)
                or dependencies_valid is False
            ):
                overall = ValidationStatus.INVALID
            elif ItemStatus.WARNING in statuses:
                overall = ValidationStatus.VALID_WITH_WARNINGS
            else:
                overall = ValidationStatus.VALID

            result = ValidationResult(
                configuration_name=name,
                overall_status=overall,
                item_results=tuple(item_results),
                system_compatible=compatibility.compatible if compatibility is not None else None,
                compatibility=compatibility,
                dependencies_valid=dependencies_valid,
                conflicts=conflicts,
                performance_impact=performance,
                issues=tuple(issues),
                recommendations=build_recommendations(
                    item_results=item_results,
                    compatibility=compatibility,
                    conflicts=conflicts,
                    performance=performance,
                ),
                mode=mode,
                duration=time.perf_counter() - start,
            )
        except Exception as e:
            payload = exception_to_error(e)
            self._log("ERROR", "validator failed", configuration=name, error=payload.to_dict())
            return ValidationResult(
                configuration_name=name,
                overall_status=ValidationStatus.ERROR,
                issues=(f"validator error: {payload.message}",),
                duration=time.perf_counter() - start,
            )

        self._log("INFO", "validation finished", configuration=name, status=result.overall_status.value)
        return result
