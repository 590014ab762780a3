"""
Validação de Configurations (somente leitura).

## Componentes

- **validator**: `Validator` (estágios estrutural, por item, compatibilidade,
  conflitos e performance)
- **types**: resultados imutáveis e enums de status
- **timeout**: execução isolada com prazo
- **performance / compatibility / conflicts / recommendations**: estágios opcionais
"""

from .compatibility import PlatformInfo, check_compatibility, detect_elevation
from .conflicts import find_conflicts
from .performance import TYPE_WEIGHTS, analyze_performance, classify_impact
from .recommendations import build_recommendations
from .timeout import TimedCall, run_with_timeout
from .types import (
    CompatibilityReport,
    Conflict,
    DependencyReport,
    ImpactLevel,
    ItemImpact,
    ItemStatus,
    ItemValidationResult,
    PerformanceImpact,
    ValidationMode,
    ValidationResult,
    ValidationStatus,
)
from .validator import Validator, structural_issues

__all__ = [
    "PlatformInfo",
    "check_compatibility",
    "detect_elevation",
    "find_conflicts",
    "TYPE_WEIGHTS",
    "analyze_performance",
    "classify_impact",
    "build_recommendations",
    "TimedCall",
    "run_with_timeout",
    "CompatibilityReport",
    "Conflict",
    "DependencyReport",
    "ImpactLevel",
    "ItemImpact",
    "ItemStatus",
    "ItemValidationResult",
    "PerformanceImpact",
    "ValidationMode",
    "ValidationResult",
    "ValidationStatus",
    "Validator",
    "structural_issues",
]
