# src/statesmith/core/bridge/__init__.py
"""
Configuration Bridge do Statesmith.

Componentes:
    - merge     → overlay campo a campo e merge de listas por chave estável
    - discovery → raízes de busca e pontuação de arquivos de override
    - cache     → cache de resoluções com estatísticas (thread-safe)
    - baselines → definições embutidas (temas, perfis, categorias)
    - bridge    → `ConfigurationBridge` (resolução + cache)
"""

from .bridge import ConfigurationBridge, Resolution, resolve_or_default
from .cache import BridgeCache, BridgeCacheEntry
from .discovery import OverrideCandidate, SearchRoot, default_search_roots, discover_override_files
from .merge import DEFAULT_LIST_KEYS, contains, merge_by_key, overlay

__all__ = [
    "ConfigurationBridge",
    "Resolution",
    "resolve_or_default",
    "BridgeCache",
    "BridgeCacheEntry",
    "OverrideCandidate",
    "SearchRoot",
    "default_search_roots",
    "discover_override_files",
    "DEFAULT_LIST_KEYS",
    "contains",
    "merge_by_key",
    "overlay",
]
