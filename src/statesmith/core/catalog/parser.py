# src/statesmith/core/catalog/parser.py
"""
Parser canônico de declarações do Statesmith.

Este módulo transforma declarações cruas (arquivos, listas inline, presets
de categoria) em Resources canônicos e os reúne em uma única Configuration.

Normalização:
    - identificador nu (string) → Resource mínimo: name = identificador,
      type do contexto, `properties.package_id` = identificador
    - registro estruturado → mapeado campo a campo; campos fora do schema
      canônico são movidos para `properties`; defaults do contexto
      (source, category) preenchem lacunas

Política de merge de múltiplas fontes:
    - itens são adicionados um a um, na ordem das fontes
    - colisão de nome é **warning não fatal**: o item posterior é ignorado,
      nunca sobrescreve o anterior
    - um arquivo malformado não pode sombrear recursos de outro

Erros:
    - ParseError: fonte ilegível, malformada, ou item sem `name`/`type`
      (quando o contexto não fornece um tipo default)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import yaml  # PyYAML

from statesmith.core.context import RunContext
from statesmith.core.exceptions import DuplicateNameError, ParseError
from statesmith.core.resource import Resource, ResourceRegistry, ResourceType
from statesmith.core.settings.errors import UnsupportedSettingsFormatError
from statesmith.core.settings.loader import load_document

from .configuration import Configuration
from .presets import get_preset


CANONICAL_FIELDS = ("name", "type", "description", "enabled", "properties")
NAME_ALIASES = ("id", "package_id", "packageId", "PackageId")
DECLARATION_SUFFIXES = (".json", ".yaml", ".yml")

PARSER_SCOPE = "parser"

PathLike = Union[str, Path]


@dataclass
class ParseOutcome:
    """Configuration resultante + warnings não fatais do merge."""

    configuration: Configuration
    warnings: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)


def _registry(registry: Optional[ResourceRegistry]) -> ResourceRegistry:
    if registry is not None:
        return registry
    from statesmith.resources import default_registry

    return default_registry()


def normalize_declaration(
    raw: Any,
    *,
    default_type: Optional[str] = None,
    defaults: Optional[Mapping[str, Any]] = None,
    source: str = "<inline>",
) -> Dict[str, Any]:
    """
    Normaliza uma declaração crua em um dicionário canônico
    `{name, type, description, enabled, properties}`.

    Args:
        raw: identificador (str) ou registro (dict).
        default_type: tipo usado quando a declaração não informa `type`.
        defaults: valores default para `properties` (ex.: source, category).
        source: origem da declaração, usada em mensagens de erro.

    Returns:
        Dict[str, Any]: declaração canônica.

    Raises:
        ParseError: se a forma for inválida ou faltar `name`/`type`.
    """
    defaults = dict(defaults or {})

    if isinstance(raw, str):
        ident = raw.strip()
        if not ident:
            raise ParseError("Empty identifier declaration", details={"source": source})
        if not default_type:
            raise ParseError(
                f"Bare identifier '{ident}' requires a default type from context",
                details={"source": source, "item": ident},
                hint="Declare o item como registro com campo 'type' ou informe default_type.",
            )
        properties = {"package_id": ident}
        for k, v in defaults.items():
            properties.setdefault(k, v)
        return {
            "name": ident,
            "type": default_type,
            "description": "",
            "enabled": True,
            "properties": properties,
        }

    if not isinstance(raw, Mapping):
        raise ParseError(
            f"Item declaration must be a string or mapping, got {type(raw).__name__}",
            details={"source": source},
        )

    record = dict(raw)
    properties = record.get("properties") or {}
    if not isinstance(properties, Mapping):
        raise ParseError(
            "Item 'properties' must be a mapping",
            details={"source": source, "item": record.get("name")},
        )
    properties = dict(properties)

    # campos fora do schema canônico (formas heterogêneas) viram properties
    for key, value in record.items():
        if key not in CANONICAL_FIELDS:
            properties.setdefault(key, value)

    name = record.get("name")
    if not name:
        name = next((properties.get(a) for a in NAME_ALIASES if properties.get(a)), None)
    if not isinstance(name, str) or not name.strip():
        raise ParseError(
            "Item declaration is missing 'name'",
            details={"source": source, "declaration": {k: str(v) for k, v in record.items()}},
        )

    item_type = record.get("type") or default_type
    if not isinstance(item_type, str) or not item_type.strip():
        raise ParseError(
            f"Item '{name}' is missing required discriminator 'type'",
            details={"source": source, "item": name},
        )

    if item_type.lower() == ResourceType.PACKAGE.value.lower():
        properties.setdefault("package_id", name)
    for k, v in defaults.items():
        properties.setdefault(k, v)

    enabled = record.get("enabled", True)
    if isinstance(enabled, str):
        enabled = enabled.strip().lower() not in {"false", "0", "no", "off"}

    return {
        "name": name.strip(),
        "type": item_type.strip(),
        "description": str(record.get("description") or ""),
        "enabled": bool(enabled),
        "properties": properties,
    }


def build_resource(declaration: Mapping[str, Any], registry: ResourceRegistry) -> Resource:
    try:
        return registry.create(
            name=declaration["name"],
            type=declaration["type"],
            enabled=declaration.get("enabled", True),
            description=declaration.get("description", ""),
            properties=declaration.get("properties") or {},
        )
    except (KeyError, ValueError, TypeError) as e:
        raise ParseError(
            f"Cannot build resource '{declaration.get('name')}': {e}",
            details={"item": declaration.get("name"), "type": declaration.get("type")},
        ) from e


def _add_all(
    configuration: Configuration,
    resources: Iterable[Resource],
    *,
    source: str,
    warnings: List[str],
    ctx: Optional[RunContext],
) -> None:
    for resource in resources:
        try:
            configuration.add(resource)
        except DuplicateNameError:
            msg = f"Duplicate item '{resource.name}' from {source} skipped (first declaration kept)"
            warnings.append(msg)
            if ctx is not None:
                ctx.add_warning(scope=PARSER_SCOPE, message=msg)


def parse_items(
    items: Sequence[Any],
    *,
    name: str = "inline",
    version: str = "1.0",
    description: str = "",
    default_type: Optional[str] = None,
    defaults: Optional[Mapping[str, Any]] = None,
    registry: Optional[ResourceRegistry] = None,
    ctx: Optional[RunContext] = None,
    source: str = "<inline>",
) -> ParseOutcome:
    """Constrói uma Configuration a partir de uma lista inline de declarações."""
    if not isinstance(items, (list, tuple)):
        raise ParseError(
            f"Item list must be a sequence, got {type(items).__name__}",
            details={"source": source},
        )
    reg = _registry(registry)
    resources = [
        build_resource(
            normalize_declaration(raw, default_type=default_type, defaults=defaults, source=source),
            reg,
        )
        for raw in items
    ]
    configuration = Configuration(name=name, version=version, description=description, metadata={"sources": [source]})
    warnings: List[str] = []
    _add_all(configuration, resources, source=source, warnings=warnings, ctx=ctx)
    return ParseOutcome(configuration=configuration, warnings=warnings, sources=[source])


def parse_document(
    data: Any,
    *,
    source: str = "<document>",
    default_type: Optional[str] = None,
    registry: Optional[ResourceRegistry] = None,
    ctx: Optional[RunContext] = None,
) -> ParseOutcome:
    """
    Constrói uma Configuration a partir de um documento já desserializado.

    Formas aceitas:
        - {name, version, description, metadata, items: [...]}
        - [...] (lista inline de declarações)
    """
    if isinstance(data, list):
        stem = Path(source).stem if source and not source.startswith("<") else "inline"
        return parse_items(
            data, name=stem, default_type=default_type, registry=registry, ctx=ctx, source=source,
        )

    if not isinstance(data, Mapping):
        raise ParseError(
            f"Declaration root must be a mapping or list, got {type(data).__name__}",
            details={"source": source},
        )

    items = data.get("items")
    if items is None:
        raise ParseError("Declaration document has no 'items'", details={"source": source})

    metadata = data.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        raise ParseError("Document 'metadata' must be a mapping", details={"source": source})

    defaults = {k: data[k] for k in ("source", "category") if data.get(k)}
    outcome = parse_items(
        items,
        name=str(data.get("name") or (Path(source).stem if not source.startswith("<") else "document")),
        version=str(data.get("version") or ""),
        description=str(data.get("description") or ""),
        default_type=data.get("default_type") or default_type,
        defaults=defaults,
        registry=registry,
        ctx=ctx,
        source=source,
    )
    outcome.configuration.metadata = {**dict(metadata), "sources": [source]}
    return outcome


def load_file(
    path: PathLike,
    *,
    default_type: Optional[str] = None,
    registry: Optional[ResourceRegistry] = None,
    ctx: Optional[RunContext] = None,
) -> ParseOutcome:
    """
    Carrega um arquivo de declaração (JSON ou YAML).

    Raises:
        ParseError: arquivo ausente, ilegível, formato não suportado ou malformado.
    """
    p = Path(path)
    source = str(p)
    try:
        data = load_document(p)
    except FileNotFoundError as e:
        raise ParseError(f"Declaration file not found: {p}", details={"source": source}) from e
    except UnsupportedSettingsFormatError as e:
        raise ParseError(str(e), details={"source": source}) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read declaration file {p}: {e}", details={"source": source}) from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ParseError(f"Malformed declaration file {p}: {e}", details={"source": source}) from e

    if data is None:
        raise ParseError(f"Declaration file is empty: {p}", details={"source": source})

    outcome = parse_document(data, source=source, default_type=default_type, registry=registry, ctx=ctx)
    if ctx is not None:
        ctx.log(scope=PARSER_SCOPE, level="INFO", message="declaration loaded", source=source,
                items=len(outcome.configuration))
    return outcome


def merge_configurations(
    outcomes: Sequence[ParseOutcome],
    *,
    name: Optional[str] = None,
    version: Optional[str] = None,
    description: str = "",
    ctx: Optional[RunContext] = None,
) -> ParseOutcome:
    """
    Mescla várias Configurations em uma, item a item.

    A identidade (name/version) default vem da primeira fonte.
    Colisões de nome geram warnings e mantêm a primeira declaração.
    """
    if not outcomes:
        raise ParseError("No declaration sources to merge")

    first = outcomes[0].configuration
    merged = Configuration(
        name=name or first.name,
        version=version if version is not None else first.version,
        description=description or first.description,
        metadata=dict(first.metadata),
    )
    warnings: List[str] = []
    sources: List[str] = []

    for outcome in outcomes:
        warnings.extend(outcome.warnings)
        src = ", ".join(outcome.sources) or outcome.configuration.name
        sources.extend(outcome.sources)
        _add_all(merged, outcome.configuration.items, source=src, warnings=warnings, ctx=ctx)

    merged.metadata["sources"] = sources
    return ParseOutcome(configuration=merged, warnings=warnings, sources=sources)


def load_directory(
    directory: PathLike,
    *,
    recursive: bool = False,
    default_type: Optional[str] = None,
    registry: Optional[ResourceRegistry] = None,
    ctx: Optional[RunContext] = None,
) -> ParseOutcome:
    """Carrega todos os arquivos de declaração de um diretório (ordem por nome)."""
    d = Path(directory)
    if not d.is_dir():
        raise ParseError(f"Declaration directory not found: {d}", details={"source": str(d)})

    pattern = "**/*" if recursive else "*"
    files = sorted(p for p in d.glob(pattern) if p.is_file() and p.suffix.lower() in DECLARATION_SUFFIXES)
    if not files:
        raise ParseError(f"No declaration files in {d}", details={"source": str(d)})

    reg = _registry(registry)
    outcomes = [load_file(f, default_type=default_type, registry=reg, ctx=ctx) for f in files]
    return merge_configurations(outcomes, name=d.name, ctx=ctx)


def load_sources(
    paths: Sequence[PathLike],
    *,
    name: Optional[str] = None,
    default_type: Optional[str] = None,
    registry: Optional[ResourceRegistry] = None,
    ctx: Optional[RunContext] = None,
) -> ParseOutcome:
    """Carrega arquivos e/ou diretórios e mescla tudo em uma Configuration."""
    reg = _registry(registry)
    outcomes: List[ParseOutcome] = []
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            outcomes.append(load_directory(p, default_type=default_type, registry=reg, ctx=ctx))
        else:
            outcomes.append(load_file(p, default_type=default_type, registry=reg, ctx=ctx))
    return merge_configurations(outcomes, name=name, ctx=ctx)


def load_preset(
    category: str,
    *,
    registry: Optional[ResourceRegistry] = None,
    ctx: Optional[RunContext] = None,
) -> ParseOutcome:
    """Constrói a Configuration de um preset de categoria (itens do tipo Package)."""
    preset = get_preset(category)
    outcome = parse_items(
        preset["items"],
        name=f"preset-{category.lower()}",
        version="1.0",
        description=preset.get("description", ""),
        default_type=ResourceType.PACKAGE.value,
        defaults={"source": preset.get("source"), "category": category.lower()},
        registry=registry,
        ctx=ctx,
        source=f"<preset:{category.lower()}>",
    )
    outcome.configuration.metadata["category"] = category.lower()
    return outcome
