# src/statesmith/core/bridge/bridge.py
"""
Configuration Bridge do Statesmith.

O Bridge resolve uma requisição nomeada `(kind, key)` — ex.:
("theme", "Dark"), ("category", "development"), ("profile", "developer") —
em um payload concreto, sobrepondo duas fontes:

    1. baseline fornecido pelo módulo (sempre presente para suas chaves)
    2. override do usuário, descoberto nas raízes de busca priorizadas

Algoritmo de resolução:
    - parte do baseline da chave solicitada
    - se existir override para a mesma chave, aplica `overlay` campo a campo
      (override vence; listas declaradas em `list_keys` são mescladas por chave)
    - sem baseline e sem override → UnresolvedConfigurationError

Cache:
    - resultados indexados por `(kind, key)`
    - habilitável/desabilitável; invalidação apenas total (`clear_cache`)
    - `get_cache_statistics` expõe contagem de itens e hits/misses

Decisões arquiteturais:
    - O Bridge é construído e passado explicitamente (sem instância global)
    - Um arquivo de override malformado é ignorado com warning; o próximo
      candidato de maior pontuação é considerado
    - O fallback para um default degradado é responsabilidade do chamador
      (ver `resolve_or_default`)
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml  # PyYAML

from statesmith.core.catalog.configuration import Configuration
from statesmith.core.catalog.parser import parse_document
from statesmith.core.context import RunContext
from statesmith.core.exceptions import ParseError, UnresolvedConfigurationError
from statesmith.core.resource import ResourceRegistry, ResourceType
from statesmith.core.settings.errors import UnsupportedSettingsFormatError
from statesmith.core.settings.loader import load_document
from statesmith.core.settings.model import BridgeSettings

from .cache import BridgeCache, cache_key
from .discovery import (
    OverrideCandidate,
    SearchRoot,
    default_search_roots,
    discover_override_files,
    roots_from_paths,
)
from .merge import overlay


BRIDGE_SCOPE = "bridge"


@dataclass(frozen=True)
class Resolution:
    """Resultado de uma resolução: payload + origem das camadas aplicadas."""

    kind: str
    key: str
    payload: Dict[str, Any]
    has_baseline: bool
    override_path: Optional[str] = None


def _lookup(section: Mapping[str, Any], name: str) -> Optional[Any]:
    for k, v in section.items():
        if isinstance(k, str) and k.lower() == name.lower():
            return v
    return None


class ConfigurationBridge:
    """Resolve requisições nomeadas sobrepondo overrides do usuário a baselines."""

    def __init__(
        self,
        baselines: Optional[Mapping[Tuple[str, str], Mapping[str, Any]]] = None,
        *,
        search_roots: Optional[Sequence[SearchRoot]] = None,
        product_names: Sequence[str] = ("statesmith",),
        cache_enabled: bool = True,
        list_keys: Optional[Mapping[str, Sequence[str]]] = None,
        ctx: Optional[RunContext] = None,
    ) -> None:
        self._baselines: Dict[Tuple[str, str], Dict[str, Any]] = {}
        for (kind, key), payload in (baselines or {}).items():
            self.register_baseline(kind, key, payload)
        self.search_roots: List[SearchRoot] = list(
            default_search_roots() if search_roots is None else search_roots
        )
        self.product_names = tuple(product_names)
        self.list_keys = list_keys
        self.ctx = ctx
        self._cache = BridgeCache(enabled=cache_enabled)

    @classmethod
    def from_settings(
        cls,
        settings: BridgeSettings,
        baselines: Optional[Mapping[Tuple[str, str], Mapping[str, Any]]] = None,
        *,
        ctx: Optional[RunContext] = None,
    ) -> "ConfigurationBridge":
        if baselines is None:
            from .baselines import default_baselines

            baselines = default_baselines()
        roots = roots_from_paths(settings.search_roots) + default_search_roots()
        return cls(
            baselines,
            search_roots=roots,
            product_names=settings.product_names,
            cache_enabled=settings.cache_enabled,
            ctx=ctx,
        )

    # -----------------------------
    # Baselines
    # -----------------------------
    def register_baseline(self, kind: str, key: str, payload: Mapping[str, Any]) -> None:
        if not isinstance(payload, Mapping):
            raise TypeError(f"baseline payload for ({kind}, {key}) must be a mapping")
        self._baselines[cache_key(kind, key)] = deepcopy(dict(payload))

    def baseline(self, kind: str, key: str) -> Optional[Dict[str, Any]]:
        payload = self._baselines.get(cache_key(kind, key))
        return deepcopy(payload) if payload is not None else None

    # -----------------------------
    # Overrides
    # -----------------------------
    def candidates(self) -> List[OverrideCandidate]:
        return discover_override_files(self.search_roots, self.product_names)

    def _read_override_file(self, path: Path) -> Optional[Mapping[str, Any]]:
        try:
            data = load_document(path)
        except (OSError, UnicodeDecodeError, UnsupportedSettingsFormatError, yaml.YAMLError, ValueError) as e:
            self._warn(f"override file {path} ignored: {e}")
            return None
        if data is None:
            return None
        if not isinstance(data, Mapping):
            self._warn(f"override file {path} ignored: root must be a mapping")
            return None
        return data

    def find_override(self, kind: str, key: str) -> Optional[Tuple[Dict[str, Any], Path]]:
        """
        Retorna (payload, caminho) do override de maior pontuação que define
        `kind.key`, ou None.

        Formato de arquivo: `{<kind>: {<key>: <payload>}}` (case-insensitive).
        """
        for candidate in self.candidates():
            data = self._read_override_file(candidate.path)
            if data is None:
                continue
            section = _lookup(data, kind)
            if not isinstance(section, Mapping):
                continue
            payload = _lookup(section, key)
            if payload is None:
                continue
            if not isinstance(payload, Mapping):
                self._warn(f"override {kind}.{key} in {candidate.path} ignored: payload must be a mapping")
                continue
            return deepcopy(dict(payload)), candidate.path
        return None

    # -----------------------------
    # Resolução
    # -----------------------------
    def resolve_detailed(self, kind: str, key: str) -> Resolution:
        cached = self._cache.get(kind, key)
        if cached is not None:
            return cached

        base = self.baseline(kind, key)
        found = self.find_override(kind, key)

        if base is None and found is None:
            raise UnresolvedConfigurationError(
                f"No baseline or override for ({kind}, {key})",
                details={"kind": kind, "key": key},
                hint="Declare um override do usuário ou recorra a um default embutido no chamador.",
            )

        if found is None:
            payload, override_path = base, None
        else:
            override, path = found
            payload = overlay(base or {}, override, self.list_keys)
            override_path = str(path)

        resolution = Resolution(
            kind=kind,
            key=key,
            payload=payload,
            has_baseline=base is not None,
            override_path=override_path,
        )
        self._cache.put(kind, key, resolution)
        if self.ctx is not None:
            self.ctx.log(
                scope=BRIDGE_SCOPE, level="INFO", message="configuration resolved",
                kind=kind, key=key, override_path=override_path,
            )
        return deepcopy(resolution)

    def resolve(self, kind: str, key: str) -> Dict[str, Any]:
        """Resolve `(kind, key)` e retorna o payload mesclado (cópia do chamador)."""
        return self.resolve_detailed(kind, key).payload

    def resolve_configuration(
        self,
        kind: str,
        key: str,
        *,
        registry: Optional[ResourceRegistry] = None,
    ) -> Configuration:
        """
        Resolve e converte o payload em Configuration via Parser.

        Raises:
            UnresolvedConfigurationError: sem baseline/override.
            ParseError: payload sem `items` ou com itens inválidos.
        """
        resolution = self.resolve_detailed(kind, key)
        payload = dict(resolution.payload)
        if "items" not in payload:
            raise ParseError(
                f"Resolved payload ({kind}, {key}) has no 'items'",
                details={"kind": kind, "key": key},
            )
        payload.setdefault("name", f"{kind.lower()}-{key.lower()}")
        payload.setdefault("version", "1.0")
        default_type = ResourceType.PACKAGE.value if kind.lower() == "category" else None
        if kind.lower() == "category":
            payload.setdefault("category", key.lower())
        outcome = parse_document(
            payload,
            source=f"<bridge:{kind.lower()}:{key.lower()}>",
            default_type=default_type,
            registry=registry,
            ctx=self.ctx,
        )
        configuration = outcome.configuration
        configuration.metadata["bridge"] = {
            "kind": kind,
            "key": key,
            "override_path": resolution.override_path,
        }
        return configuration

    # -----------------------------
    # Cache
    # -----------------------------
    @property
    def cache_enabled(self) -> bool:
        return self._cache.enabled

    @cache_enabled.setter
    def cache_enabled(self, value: bool) -> None:
        self._cache.enabled = value

    def clear_cache(self) -> None:
        self._cache.clear()

    def get_cache_statistics(self) -> Dict[str, Any]:
        return self._cache.statistics()

    def _warn(self, message: str) -> None:
        if self.ctx is not None:
            self.ctx.add_warning(scope=BRIDGE_SCOPE, message=message)


def resolve_or_default(
    bridge: ConfigurationBridge,
    kind: str,
    key: str,
    default: Mapping[str, Any],
) -> Dict[str, Any]:
    """Conveniência de fronteira: resolve ou devolve um default degradado."""
    try:
        return bridge.resolve(kind, key)
    except UnresolvedConfigurationError:
        return deepcopy(dict(default))
