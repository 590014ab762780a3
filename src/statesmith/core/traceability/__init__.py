# src/statesmith/core/traceability/__init__.py
"""
Rastreabilidade do Statesmith — RunManifest v1.

API pública:
    - RunManifest     → estrutura canônica do Manifest
    - create_manifest → criação explícita (Event Log vazio)
    - add_event       → registro explícito de eventos
    - item_started / item_finished / item_failed → estado incremental por item
    - save_manifest / load_manifest → persistência JSON determinística
"""

from .manifest import (
    RunManifest,
    add_event,
    create_manifest,
    item_failed,
    item_finished,
    item_started,
    load_manifest,
    save_manifest,
)

__all__ = [
    "RunManifest",
    "add_event",
    "create_manifest",
    "item_failed",
    "item_finished",
    "item_started",
    "load_manifest",
    "save_manifest",
]
