# src/statesmith/core/traceability/manifest.py
"""
RunManifest v1 — rastreabilidade de execuções do Statesmith.

O Manifest consolida, de forma determinística e auditável:
    - metadados do run (run_id, started_at, versão do engine)
    - hashes das entradas (Configuration e settings)
    - estado incremental de cada item aplicado
    - Event Log ordenado de eventos explícitos

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - Toda mutação ocorre por chamadas explícitas da API
    - A ordem do Event Log reflete a ordem real de execução
    - O Manifest é serializável e reconstruível (round-trip)

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - O formato de persistência é JSON determinístico (`sort_keys=True`)

Limites explícitos:
    - Não executa itens
    - Não decide políticas de execução (force, dry-run, abort)
    - Não realiza migração de versões de schema
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union


ManifestLike = Union["RunManifest", Dict[str, Any]]


def _ensure_tzaware_utc(dt: datetime) -> datetime:
    """Normaliza um timestamp para timezone-aware em UTC (naive é assumido como UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime) -> str:
    return _ensure_tzaware_utc(dt).isoformat()


def _ms_between(start: datetime, end: datetime) -> int:
    s = _ensure_tzaware_utc(start)
    e = _ensure_tzaware_utc(end)
    return max(0, int((e - s).total_seconds() * 1000))


@dataclass
class RunManifest:
    """
    Registro de uma execução de Configuration.

    Campos principais:
        - run: metadados da execução (run_id, started_at, engine_version, mode)
        - inputs: hashes da Configuration e das settings
        - items: estado incremental de cada item, indexado por nome
        - events: Event Log ordenado

    Invariantes:
        - `items` é sempre um dicionário indexado por nome de item
        - `events` é sempre uma lista ordenada
        - A estrutura completa é serializável em JSON
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    items: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "items": {k: dict(v) for k, v in self.items.items()},
            "events": [dict(e) for e in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunManifest":
        """Reconstrução permissiva: campos ausentes viram estruturas vazias."""
        return cls(
            run=dict(data.get("run", {})),
            inputs=dict(data.get("inputs", {})),
            items={k: dict(v) for k, v in (data.get("items", {}) or {}).items()},
            events=[dict(e) for e in (data.get("events", []) or [])],
        )


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    engine_version: str,
    configuration_hash: str,
    settings_hash: str,
    mode: str = "apply",
) -> RunManifest:
    """
    Cria o Manifest inicial de uma execução.

    ⚠️ Esta função **não emite eventos**. O Event Log inicia vazio e só é
    preenchido por `add_event`, `item_started`, `item_finished` ou `item_failed`.
    """
    started_at = _ensure_tzaware_utc(started_at)
    return RunManifest(
        run={
            "run_id": run_id,
            "started_at": _iso(started_at),
            "engine_version": engine_version,
            "mode": mode,
        },
        inputs={
            "configuration_hash": configuration_hash,
            "settings_hash": settings_hash,
        },
        items={},
        events=[],
    )


def add_event(
    manifest: ManifestLike,
    *,
    event_type: str,
    ts: datetime,
    item: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """Adiciona um evento ao final do Event Log (dicts são atualizados in-place)."""
    m, is_dict = _get_manifest(manifest)
    ev: Dict[str, Any] = {"event_type": event_type, "timestamp": _iso(ts)}
    if item is not None:
        ev["item"] = item
    if payload is not None:
        ev["payload"] = payload
    m.events.append(ev)

    if is_dict:
        _write_back(manifest, m)  # type: ignore[arg-type]


def _get_manifest(manifest: ManifestLike) -> Tuple[RunManifest, bool]:
    if isinstance(manifest, RunManifest):
        return manifest, False
    return RunManifest.from_dict(manifest), True


def _write_back(target: Dict[str, Any], m: RunManifest) -> None:
    target.clear()
    target.update(m.to_dict())


def item_started(manifest: ManifestLike, *, item: str, item_type: str, ts: datetime) -> None:
    m, is_dict = _get_manifest(manifest)

    m.items.setdefault(item, {})
    m.items[item].update(
        {
            "item": item,
            "type": item_type,
            "status": "running",
            "started_at": _iso(ts),
        }
    )
    add_event(m, event_type="item_started", ts=ts, item=item, payload={"type": item_type})

    if is_dict:
        _write_back(manifest, m)  # type: ignore[arg-type]


def item_finished(manifest: ManifestLike, *, item: str, ts: datetime, result: Dict[str, Any]) -> None:
    """
    Registra a conclusão de um item.

    `result` segue a forma de `ExecutionResult.to_dict()`: `success`,
    `message`, `changes`. A duração é calculada a partir de `started_at`
    quando disponível.
    """
    m, is_dict = _get_manifest(manifest)

    s = m.items.setdefault(item, {"item": item})
    started_iso = s.get("started_at")
    try:
        started_dt = datetime.fromisoformat(started_iso) if started_iso else ts
    except ValueError:
        started_dt = ts

    status = "success" if result.get("success", True) else "failed"
    s.update(
        {
            "status": status,
            "finished_at": _iso(ts),
            "duration_ms": _ms_between(started_dt, ts),
            "message": result.get("message"),
            "changes": result.get("changes"),
        }
    )
    add_event(
        m,
        event_type="item_finished",
        ts=ts,
        item=item,
        payload={"status": status, "duration_ms": s["duration_ms"]},
    )

    if is_dict:
        _write_back(manifest, m)  # type: ignore[arg-type]


def item_failed(manifest: ManifestLike, *, item: str, ts: datetime, error: Dict[str, Any]) -> None:
    m, is_dict = _get_manifest(manifest)

    s = m.items.setdefault(item, {"item": item})
    s.update(
        {
            "status": "failed",
            "finished_at": _iso(ts),
            "error": error,
        }
    )
    add_event(m, event_type="item_failed", ts=ts, item=item, payload={"error": error})

    if is_dict:
        _write_back(manifest, m)  # type: ignore[arg-type]


def save_manifest(manifest: ManifestLike, path: Path) -> None:
    """
    Persiste o Manifest em JSON determinístico.

    Diretórios intermediários são criados automaticamente.

    Raises:
        OSError: Falha ao criar diretórios ou escrever o arquivo.
        TypeError: Conteúdo não serializável em JSON.
    """
    data = manifest.to_dict() if isinstance(manifest, RunManifest) else manifest
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True), encoding="utf-8")


def load_manifest(path: Path) -> RunManifest:
    data = json.loads(path.read_text(encoding="utf-8"))
    return RunManifest.from_dict(data)
