# src/statesmith/core/bridge/cache.py
"""
Cache de resoluções do Bridge.

Entradas são indexadas por `(request_kind, request_key)` (normalizados em
minúsculas) e guardam o valor resolvido com timestamp de criação.

Decisões arquiteturais:
    - Leituras concorrentes são seguras; escritas são serializadas (RLock)
    - Invalidação apenas total (`clear`); não há invalidação por chave
    - Chamadores recebem cópias profundas: o cache nunca é mutado por fora
    - Com o cache desabilitado, leituras e escritas são ignoradas e contadas
      como `bypassed`

Invariantes:
    - hits + misses contam apenas consultas com o cache habilitado
    - `clear` zera as entradas, não as estatísticas
"""

from __future__ import annotations

import threading
from copy import deepcopy
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


CacheKey = Tuple[str, str]


def cache_key(kind: str, key: str) -> CacheKey:
    return (kind.strip().lower(), key.strip().lower())


@dataclass(frozen=True)
class BridgeCacheEntry:
    kind: str
    key: str
    value: Any
    created_at: datetime


class BridgeCache:

    def __init__(self, *, enabled: bool = True) -> None:
        self._lock = threading.RLock()
        self._entries: Dict[CacheKey, BridgeCacheEntry] = {}
        self._enabled = bool(enabled)
        self._hits = 0
        self._misses = 0
        self._bypassed = 0
        self._clears = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        with self._lock:
            self._enabled = bool(value)

    def get(self, kind: str, key: str) -> Optional[Any]:
        with self._lock:
            if not self._enabled:
                self._bypassed += 1
                return None
            entry = self._entries.get(cache_key(kind, key))
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return deepcopy(entry.value)

    def put(self, kind: str, key: str, value: Any) -> None:
        with self._lock:
            if not self._enabled:
                return
            k = cache_key(kind, key)
            self._entries[k] = BridgeCacheEntry(
                kind=k[0],
                key=k[1],
                value=deepcopy(value),
                created_at=datetime.now(timezone.utc),
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._clears += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def statistics(self) -> Dict[str, Any]:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "enabled": self._enabled,
                "items": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "bypassed": self._bypassed,
                "clears": self._clears,
                "hit_ratio": round(self._hits / lookups, 4) if lookups else 0.0,
                "keys": sorted(f"{k}:{v}" for k, v in self._entries),
            }
