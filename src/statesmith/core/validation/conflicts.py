"""Detecção de conflitos entre itens de uma Configuration.

Dois tipos de conflito são reportados:

- duplicate-package-source: o mesmo pacote lógico solicitado por fontes
  (gerenciadores) diferentes. A identidade lógica vem de
  `properties.logical_name` ou, na ausência, do último segmento do
  `package_id` normalizado (ex.: "Git.Git" e "git" → "git").
- setting-target: dois itens de configuração apontando para o mesmo alvo
  (`path` + `key`/`value_name`) com valores desejados diferentes.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .types import Conflict, DependencyReport


_NON_ALNUM = re.compile(r"[^a-z0-9]+")

PACKAGE_TYPE = "package"


def logical_package_name(resource: Any) -> Optional[str]:
    props = getattr(resource, "properties", {}) or {}
    explicit = props.get("logical_name")
    if explicit:
        return _NON_ALNUM.sub("", str(explicit).lower()) or None
    package_id = props.get("package_id")
    if not package_id:
        return None
    last = str(package_id).split(".")[-1]
    return _NON_ALNUM.sub("", last.lower()) or None


def _setting_target(resource: Any) -> Optional[Tuple[str, str]]:
    props = getattr(resource, "properties", {}) or {}
    path = props.get("path")
    key = props.get("value_name", props.get("key"))
    if path is None or key is None:
        return None
    return str(path).lower(), str(key).lower()


def find_conflicts(resources: Iterable[Any]) -> DependencyReport:
    packages: Dict[str, List[Any]] = {}
    targets: Dict[Tuple[str, str], List[Any]] = {}

    for r in resources:
        if not r.enabled:
            continue
        if str(r.type).lower() == PACKAGE_TYPE:
            ident = logical_package_name(r)
            if ident:
                packages.setdefault(ident, []).append(r)
            continue
        target = _setting_target(r)
        if target is not None:
            targets.setdefault(target, []).append(r)

    conflicts: List[Conflict] = []

    for ident, group in packages.items():
        sources = sorted({str(r.properties.get("source", "")).lower() for r in group})
        if len(group) > 1 and len(sources) > 1:
            conflicts.append(
                Conflict(
                    kind="duplicate-package-source",
                    identity=ident,
                    items=tuple(r.name for r in group),
                    sources=tuple(sources),
                )
            )

    for (path, key), group in targets.items():
        if len(group) < 2:
            continue
        values = {repr(r.properties.get("value")) for r in group}
        if len(values) > 1:
            conflicts.append(
                Conflict(kind="setting-target", identity=f"{path}::{key}", items=tuple(r.name for r in group))
            )

    return DependencyReport(valid=not conflicts, conflicts=tuple(conflicts))
