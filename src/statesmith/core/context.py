# src/statesmith/core/context.py
"""
Contexto de execução compartilhado de um run do Statesmith.

Este módulo define o `RunContext`, a estrutura canônica utilizada para
registrar eventos estruturados e warnings durante o parse, a validação
e a aplicação de uma Configuration.

O RunContext atua como o único canal de observabilidade do engine:
    - registro de logs estruturados (eventos com timestamp UTC)
    - coleta de warnings não fatais agrupados por escopo
    - acesso às settings efetivas do run

Princípios fundamentais:
    - Isolamento por execução (cada run possui seu próprio contexto)
    - Ausência de estado global ou logger configurado implicitamente
    - Estrutura simples, serializável e testável

Invariantes:
    - Logs sempre incluem `run_id` e `scope`
    - Warnings são agrupados por `scope` (nome do item ou componente)
    - A ordem de `events` reflete a ordem real das chamadas

Limites explícitos:
    - Não executa recursos
    - Não decide políticas de execução
    - Não persiste dados automaticamente (ver traceability.manifest)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List
import uuid


@dataclass
class RunContext:
    """
    Contexto de execução compartilhado de um run.

    Campos canônicos:
    - run_id: identificador único da execução
    - created_at: timestamp UTC de criação do contexto
    - settings: settings efetivas (defaults + local deep-merge)
    - meta: metadados livres (ex.: fontes de declaração, host)
    - events: log estruturado de eventos
    - warnings: warnings por escopo
    """

    run_id: str
    created_at: datetime
    settings: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def new(cls, *, settings: Dict[str, Any] | None = None, **meta: Any) -> "RunContext":
        return cls(
            run_id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
            settings=dict(settings or {}),
            meta=dict(meta),
        )

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, scope: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "scope": scope,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, scope: str, message: str) -> None:
        if scope not in self.warnings:
            self.warnings[scope] = []
        self.warnings[scope].append(message)
        self.log(scope=scope, level="WARNING", message=message)

    def events_for(self, scope: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("scope") == scope]
