# src/statesmith/core/settings/model.py
"""
Modelo tipado das settings efetivas do engine.

`EngineSettings.from_dict` converte o dicionário resolvido pelo loader em
estruturas imutáveis e valida os domínios de cada valor. Validator, Executor
e Bridge recebem estas estruturas, nunca o dicionário cru.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import SettingsValueError
from .loader import DEFAULT_SETTINGS
from .merge import deep_merge


MIN_TIMEOUT_SECONDS = 5
MAX_TIMEOUT_SECONDS = 300
MAX_THROTTLE = 5


def _range_details(key: str, value: Any, low: float, high: Optional[float]) -> Dict[str, Any]:
    return {"key": key, "value": value, "allowed": {"min": low, "max": high}}


@dataclass(frozen=True)
class ValidationSettings:
    timeout_seconds: float = 30
    parallel: bool = False
    throttle: int = 4
    check_compatibility: bool = True
    check_dependencies: bool = True
    analyze_performance: bool = True

    def __post_init__(self) -> None:
        if not MIN_TIMEOUT_SECONDS <= self.timeout_seconds <= MAX_TIMEOUT_SECONDS:
            raise SettingsValueError(
                f"validation.timeout_seconds deve estar em "
                f"[{MIN_TIMEOUT_SECONDS}, {MAX_TIMEOUT_SECONDS}], recebido: {self.timeout_seconds}",
                details=_range_details("validation.timeout_seconds", self.timeout_seconds, MIN_TIMEOUT_SECONDS, MAX_TIMEOUT_SECONDS),
                hint="Ajuste validation.timeout_seconds no arquivo de settings local.",
            )
        if not 1 <= self.throttle <= MAX_THROTTLE:
            raise SettingsValueError(
                f"validation.throttle deve estar em [1, {MAX_THROTTLE}], recebido: {self.throttle}",
                details=_range_details("validation.throttle", self.throttle, 1, MAX_THROTTLE),
            )


@dataclass(frozen=True)
class ExecutionSettings:
    dry_run: bool = False
    force: bool = False
    include_types: Tuple[str, ...] = ()
    exclude_types: Tuple[str, ...] = ()
    batch_workers: int = 4
    batch_timeout_seconds: float = 600

    def __post_init__(self) -> None:
        if self.batch_workers < 1:
            raise SettingsValueError(
                f"execution.batch_workers deve ser >= 1, recebido: {self.batch_workers}",
                details=_range_details("execution.batch_workers", self.batch_workers, 1, None),
            )
        if self.batch_timeout_seconds <= 0:
            raise SettingsValueError(
                f"execution.batch_timeout_seconds deve ser > 0, recebido: {self.batch_timeout_seconds}",
                details={"key": "execution.batch_timeout_seconds", "value": self.batch_timeout_seconds},
            )

    def selects(self, item_type: str) -> bool:
        """Aplica os filtros include/exclude por tipo (comparação case-insensitive)."""
        t = item_type.lower()
        if self.include_types and t not in {i.lower() for i in self.include_types}:
            return False
        return t not in {e.lower() for e in self.exclude_types}


@dataclass(frozen=True)
class BridgeSettings:
    cache_enabled: bool = True
    search_roots: Tuple[str, ...] = ()
    product_names: Tuple[str, ...] = ("statesmith",)


@dataclass(frozen=True)
class EngineSettings:
    """Settings efetivas e validadas de um run."""

    validation: ValidationSettings = field(default_factory=ValidationSettings)
    execution: ExecutionSettings = field(default_factory=ExecutionSettings)
    bridge: BridgeSettings = field(default_factory=BridgeSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None = None) -> "EngineSettings":
        """
        Constrói settings tipadas a partir de um dicionário parcial ou completo.

        Chaves ausentes herdam `DEFAULT_SETTINGS`; chaves desconhecidas em cada
        seção são rejeitadas para evitar erros de digitação silenciosos.

        Raises:
            SettingsValueError: Se algum valor estiver fora do domínio permitido.
        """
        resolved = deep_merge(DEFAULT_SETTINGS, dict(data or {}))

        def section(name: str, allowed: type) -> Dict[str, Any]:
            raw = resolved.get(name) or {}
            known = set(allowed.__dataclass_fields__)
            unknown = sorted(set(raw) - known)
            if unknown:
                raise SettingsValueError(
                    f"Chaves desconhecidas em '{name}': {unknown}",
                    details={"section": name, "unknown": unknown, "allowed": sorted(known)},
                    hint="Verifique a grafia das chaves; cada seção aceita apenas os campos listados em details.allowed.",
                )
            return {k: tuple(v) if isinstance(v, list) else v for k, v in raw.items()}

        return cls(
            validation=ValidationSettings(**section("validation", ValidationSettings)),
            execution=ExecutionSettings(**section("execution", ExecutionSettings)),
            bridge=BridgeSettings(**section("bridge", BridgeSettings)),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        for sec in out.values():
            for k, v in sec.items():
                if isinstance(v, tuple):
                    sec[k] = list(v)
        return out
