# src/statesmith/core/validation/types.py
"""
Tipos canônicos do Validator do Statesmith.

Este módulo define os enums e estruturas imutáveis que representam o
resultado de um run de validação.

Componentes principais:
    - ValidationStatus → status global (VALID, VALID_WITH_WARNINGS, INVALID, ERROR)
    - ItemStatus       → status por item (VALID, INVALID, WARNING)
    - ImpactLevel      → nível de impacto estimado (LOW, MEDIUM, HIGH)
    - ItemValidationResult, ItemImpact, PerformanceImpact,
      CompatibilityReport, Conflict, DependencyReport, ValidationResult

Invariantes:
    - Todas as estruturas são frozen; coleções são tuplas
    - Um ValidationResult nunca é alterado após retornado
    - `to_dict` produz apenas tipos serializáveis em JSON
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ValidationStatus(str, Enum):
    """
    Status global de uma validação.

    - ERROR é reservado a falhas internas do Validator, distinto de um
      INVALID calculado normalmente.
    """
    VALID = "Valid"
    VALID_WITH_WARNINGS = "ValidWithWarnings"
    INVALID = "Invalid"
    ERROR = "Error"


class ItemStatus(str, Enum):
    VALID = "Valid"
    INVALID = "Invalid"
    WARNING = "Warning"


class ImpactLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ValidationMode(str, Enum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    FALLBACK = "parallel-fallback-sequential"


@dataclass(frozen=True)
class ItemValidationResult:
    """Resultado da validação de um item (tempo em segundos)."""

    item_name: str
    item_type: str
    status: ItemStatus
    issues: Tuple[str, ...] = ()
    elapsed: float = 0.0
    satisfied: Optional[bool] = None
    error: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_name": self.item_name,
            "item_type": self.item_type,
            "status": self.status.value,
            "issues": list(self.issues),
            "elapsed": self.elapsed,
            "satisfied": self.satisfied,
            "error": self.error,
        }


@dataclass(frozen=True)
class ItemImpact:
    item_name: str
    item_type: str
    estimated_time: float
    impact_level: ImpactLevel
    requires_network: bool = False
    requires_reboot: bool = False


@dataclass(frozen=True)
class PerformanceImpact:
    """Estimativa agregada de custo de aplicação (segundos)."""

    items: Tuple[ItemImpact, ...] = ()
    estimated_duration: float = 0.0
    low_count: int = 0
    medium_count: int = 0
    high_count: int = 0
    requires_network: bool = False
    requires_reboot: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimated_duration": self.estimated_duration,
            "low_count": self.low_count,
            "medium_count": self.medium_count,
            "high_count": self.high_count,
            "requires_network": self.requires_network,
            "requires_reboot": self.requires_reboot,
            "items": [
                {
                    "item_name": i.item_name,
                    "item_type": i.item_type,
                    "estimated_time": i.estimated_time,
                    "impact_level": i.impact_level.value,
                    "requires_network": i.requires_network,
                    "requires_reboot": i.requires_reboot,
                }
                for i in self.items
            ],
        }


@dataclass(frozen=True)
class CompatibilityReport:
    compatible: bool
    reasons: Tuple[str, ...] = ()
    platform: str = ""
    elevated: Optional[bool] = None
    elevation_required_by: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compatible": self.compatible,
            "reasons": list(self.reasons),
            "platform": self.platform,
            "elevated": self.elevated,
            "elevation_required_by": list(self.elevation_required_by),
        }


@dataclass(frozen=True)
class Conflict:
    """Itens funcionalmente equivalentes (ou com o mesmo alvo) declarados mais de uma vez."""

    kind: str
    identity: str
    items: Tuple[str, ...]
    sources: Tuple[str, ...] = ()

    def describe(self) -> str:
        if self.sources:
            return f"{self.identity}: {', '.join(self.items)} (sources: {', '.join(self.sources)})"
        return f"{self.identity}: {', '.join(self.items)}"


@dataclass(frozen=True)
class DependencyReport:
    valid: bool
    conflicts: Tuple[Conflict, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    """
    Resultado imutável de um run de validação.

    Contagens são sempre derivadas de `item_results` no momento da construção.
    """

    configuration_name: str
    overall_status: ValidationStatus
    item_results: Tuple[ItemValidationResult, ...] = ()
    system_compatible: Optional[bool] = None
    compatibility: Optional[CompatibilityReport] = None
    dependencies_valid: Optional[bool] = None
    conflicts: Tuple[Conflict, ...] = ()
    performance_impact: Optional[PerformanceImpact] = None
    issues: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()
    mode: ValidationMode = ValidationMode.SEQUENTIAL
    duration: float = 0.0
    total_count: int = field(init=False)
    valid_count: int = field(init=False)
    invalid_count: int = field(init=False)
    warning_count: int = field(init=False)

    def __post_init__(self) -> None:
        statuses = [r.status for r in self.item_results]
        object.__setattr__(self, "total_count", len(statuses))
        object.__setattr__(self, "valid_count", statuses.count(ItemStatus.VALID))
        object.__setattr__(self, "invalid_count", statuses.count(ItemStatus.INVALID))
        object.__setattr__(self, "warning_count", statuses.count(ItemStatus.WARNING))

    @property
    def is_valid(self) -> bool:
        return self.overall_status in (ValidationStatus.VALID, ValidationStatus.VALID_WITH_WARNINGS)

    def result_for(self, name: str) -> Optional[ItemValidationResult]:
        return next((r for r in self.item_results if r.item_name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "configuration_name": self.configuration_name,
            "overall_status": self.overall_status.value,
            "mode": self.mode.value,
            "duration": self.duration,
            "counts": {
                "total": self.total_count,
                "valid": self.valid_count,
                "invalid": self.invalid_count,
                "warning": self.warning_count,
            },
            "item_results": [r.to_dict() for r in self.item_results],
            "system_compatible": self.system_compatible,
            "compatibility": self.compatibility.to_dict() if self.compatibility else None,
            "dependencies_valid": self.dependencies_valid,
            "conflicts": [
                {"kind": c.kind, "identity": c.identity, "items": list(c.items), "sources": list(c.sources)}
                for c in self.conflicts
            ],
            "performance_impact": self.performance_impact.to_dict() if self.performance_impact else None,
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
        }
