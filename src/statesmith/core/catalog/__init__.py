# src/statesmith/core/catalog/__init__.py
"""
Catálogo de declarações do Statesmith.

Este pacote transforma declarações cruas em uma Configuration canônica:

    - configuration → agregado ordenado com unicidade de nomes
    - parser        → normalização, carga de arquivos/diretórios, merge de fontes
    - presets       → catálogos embutidos de pacotes por categoria

Invariantes:
    - Nenhum item é sobrescrito silenciosamente
    - Colisões entre fontes viram warnings, nunca falhas fatais
"""

from .configuration import Configuration
from .parser import (
    ParseOutcome,
    build_resource,
    load_directory,
    load_file,
    load_preset,
    load_sources,
    merge_configurations,
    normalize_declaration,
    parse_document,
    parse_items,
)
from .presets import CATEGORY_PRESETS, get_preset, list_presets

__all__ = [
    "Configuration",
    "ParseOutcome",
    "build_resource",
    "load_directory",
    "load_file",
    "load_preset",
    "load_sources",
    "merge_configurations",
    "normalize_declaration",
    "parse_document",
    "parse_items",
    "CATEGORY_PRESETS",
    "get_preset",
    "list_presets",
]
