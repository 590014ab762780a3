# src/statesmith/core/validation/recommendations.py
"""
Geração determinística de recomendações a partir de um resultado de validação.

As regras são avaliadas em ordem fixa; a mesma entrada sempre produz a
mesma lista, na mesma ordem.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .types import (
    CompatibilityReport,
    Conflict,
    ItemStatus,
    ItemValidationResult,
    PerformanceImpact,
)


LONG_RUN_SECONDS = 1800
MANY_HIGH_IMPACT = 5


def build_recommendations(
    *,
    item_results: Sequence[ItemValidationResult],
    compatibility: Optional[CompatibilityReport] = None,
    conflicts: Sequence[Conflict] = (),
    performance: Optional[PerformanceImpact] = None,
) -> Tuple[str, ...]:
    out: List[str] = []

    invalid = [r for r in item_results if r.status == ItemStatus.INVALID]
    timed_out = [r.item_name for r in invalid if "validation timeout" in r.issues]
    drifted = [r for r in item_results if r.satisfied is False]
    warned = [r for r in item_results if r.status == ItemStatus.WARNING]

    if invalid:
        out.append(f"Fix {len(invalid)} invalid item(s) before applying")
    if timed_out:
        out.append(f"Investigate unresponsive resources: {', '.join(timed_out)}")

    if compatibility is not None and not compatibility.compatible:
        if compatibility.elevation_required_by and compatibility.elevated is False:
            out.append("Run with elevated privileges")
        other = [r for r in compatibility.reasons if not r.startswith("elevated privileges")]
        if other:
            out.append(f"Resolve system compatibility issues: {'; '.join(other)}")

    for c in conflicts:
        out.append(f"Remove conflicting declarations for {c.describe()}")

    if drifted:
        out.append(f"Apply the configuration to converge {len(drifted)} item(s)")
    elif warned:
        out.append(f"Review {len(warned)} item(s) with warnings")

    if performance is not None:
        if performance.requires_reboot:
            out.append("Plan for a system restart after applying")
        if performance.requires_network:
            out.append("Ensure network connectivity while applying")
        if performance.estimated_duration > LONG_RUN_SECONDS:
            minutes = int(round(performance.estimated_duration / 60))
            out.append(f"Split the configuration into smaller batches (estimated {minutes} min)")
        elif performance.high_count >= MANY_HIGH_IMPACT:
            out.append(f"Schedule the {performance.high_count} high-impact items during a maintenance window")

    return tuple(out)
