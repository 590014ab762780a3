"""PerformanceImpact v1 — estimativa ponderada de custo por tipo de recurso.

Tabela de pesos (segundos) por tipo; tipos desconhecidos recebem
DEFAULT_WEIGHT. Um item pode declarar `properties.estimated_seconds`
para substituir o peso do seu tipo.

Classificação:
- > 60s  → HIGH
- > 15s  → MEDIUM
- senão  → LOW

Rede e reinício são sinalizados por pertinência a conjuntos fixos de tipos
(ou por `properties.requires_network` / `properties.restart_required`).
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from .types import ImpactLevel, ItemImpact, PerformanceImpact


TYPE_WEIGHTS: Mapping[str, float] = {
    "Package": 45,
    "FeatureToggle": 120,
    "RegistryLikeSetting": 2,
    "TerminalSettings": 5,
    "ProfileSettings": 5,
    "JsonSettings": 2,
    "Telemetry": 5,
    "Driver": 180,
    "Command": 30,
}

DEFAULT_WEIGHT = 10.0

HIGH_THRESHOLD = 60
MEDIUM_THRESHOLD = 15

NETWORK_TYPES = frozenset({"Package", "Driver"})
REBOOT_TYPES = frozenset({"FeatureToggle", "Driver"})


def classify_impact(seconds: float) -> ImpactLevel:
    if seconds > HIGH_THRESHOLD:
        return ImpactLevel.HIGH
    if seconds > MEDIUM_THRESHOLD:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


def _lookup(table: Mapping[str, float], item_type: str) -> Optional[float]:
    if item_type in table:
        return float(table[item_type])
    lowered = item_type.lower()
    for k, v in table.items():
        if k.lower() == lowered:
            return float(v)
    return None


def _in(types: Iterable[str], item_type: str) -> bool:
    return item_type.lower() in {t.lower() for t in types}


def estimate_item(resource: Any, weights: Optional[Mapping[str, float]] = None) -> ItemImpact:
    table = TYPE_WEIGHTS if weights is None else weights
    props = getattr(resource, "properties", {}) or {}
    item_type = str(resource.type)

    explicit = props.get("estimated_seconds")
    if explicit is not None:
        seconds = float(explicit)
    else:
        found = _lookup(table, item_type)
        seconds = DEFAULT_WEIGHT if found is None else found

    return ItemImpact(
        item_name=resource.name,
        item_type=item_type,
        estimated_time=seconds,
        impact_level=classify_impact(seconds),
        requires_network=bool(props.get("requires_network", _in(NETWORK_TYPES, item_type))),
        requires_reboot=bool(props.get("restart_required", _in(REBOOT_TYPES, item_type))),
    )


def analyze_performance(resources: Iterable[Any], weights: Optional[Mapping[str, float]] = None) -> PerformanceImpact:
    """Estima custo por item e agrega a duração total e as contagens por nível."""
    items = tuple(estimate_item(r, weights) for r in resources)
    levels = [i.impact_level for i in items]
    return PerformanceImpact(
        items=items,
        estimated_duration=sum(i.estimated_time for i in items),
        low_count=levels.count(ImpactLevel.LOW),
        medium_count=levels.count(ImpactLevel.MEDIUM),
        high_count=levels.count(ImpactLevel.HIGH),
        requires_network=any(i.requires_network for i in items),
        requires_reboot=any(i.requires_reboot for i in items),
    )
