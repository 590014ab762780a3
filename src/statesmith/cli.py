# src/statesmith/cli.py
"""
Interface de linha de comando do Statesmith.

Subcomandos:
    - validate PATH... → valida declarações sem alterar o sistema
    - apply PATH...    → aplica declarações (force, dry-run, filtros de tipo)
    - resolve KIND KEY → resolve um payload via Configuration Bridge

Códigos de saída:
    - 0: sucesso
    - 1: itens inválidos/falhos ou requisição não resolvida
    - 2: erro de parse ou de settings
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from statesmith import __version__
from statesmith.core.bridge import ConfigurationBridge
from statesmith.core.catalog import ParseOutcome, list_presets, load_preset, load_sources, merge_configurations
from statesmith.core.context import RunContext
from statesmith.core.engine import Executor
from statesmith.core.exceptions import ParseError, UnresolvedConfigurationError, is_critical
from statesmith.core.settings import EngineSettings, SettingsError, compute_settings_hash, load_settings
from statesmith.core.traceability import create_manifest, save_manifest
from statesmith.core.validation import Validator, structural_issues
from statesmith.report.report_md import generate_execution_md, generate_validation_md


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _add_common(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("--settings", help="Arquivo de settings do projeto (YAML/JSON)")
    sub.add_argument("--local", help="Overrides locais de settings (opcional)")
    sub.add_argument("--json", action="store_true", help="Emite JSON em vez de Markdown")


def _add_sources(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("paths", nargs="*", help="Arquivos ou diretórios de declaração")
    sub.add_argument(
        "--preset",
        action="append",
        default=[],
        choices=list_presets(),
        help="Inclui um preset de categoria (repetível)",
    )
    sub.add_argument("--name", help="Nome da Configuration mesclada")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="statesmith", description="Declarative configuration engine")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subs = parser.add_subparsers(dest="command", required=True)

    validate = subs.add_parser("validate", help="Valida declarações sem alterar o sistema")
    _add_sources(validate)
    _add_common(validate)
    validate.add_argument("--parallel", action="store_true", default=None, help="Testa itens em paralelo")
    validate.add_argument("--timeout", type=float, help="Timeout por item em segundos (5-300)")
    validate.add_argument("--throttle", type=int, help="Workers do modo paralelo (1-5)")

    apply = subs.add_parser("apply", help="Aplica declarações")
    _add_sources(apply)
    _add_common(apply)
    apply.add_argument("--force", action="store_true", default=None, help="Aplica mesmo se já satisfeito")
    apply.add_argument("--dry-run", action="store_true", default=None, help="Apenas reporta o que seria aplicado")
    apply.add_argument("--include-type", action="append", dest="include_types", help="Aplica apenas estes tipos")
    apply.add_argument("--exclude-type", action="append", dest="exclude_types", help="Ignora estes tipos")
    apply.add_argument("--manifest", help="Grava o RunManifest em JSON neste caminho")

    resolve = subs.add_parser("resolve", help="Resolve um payload via Configuration Bridge")
    resolve.add_argument("kind")
    resolve.add_argument("key")
    _add_common(resolve)
    resolve.add_argument("--search-root", action="append", default=[], help="Raiz extra de busca de overrides")
    resolve.add_argument("--no-cache", action="store_true", help="Desabilita o cache do Bridge")

    return parser


def _load_engine_settings(args: argparse.Namespace) -> EngineSettings:
    return EngineSettings.from_dict(load_settings(defaults_path=args.settings, local_path=args.local))


def _load_configuration(args: argparse.Namespace, ctx: RunContext) -> ParseOutcome:
    outcomes: List[ParseOutcome] = []
    if args.paths:
        outcomes.append(load_sources(args.paths, ctx=ctx))
    for preset in args.preset:
        outcomes.append(load_preset(preset, ctx=ctx))
    if not outcomes:
        raise ParseError("No declaration sources given", hint="Informe PATH(s) ou --preset.")
    if len(outcomes) == 1 and not args.name:
        return outcomes[0]
    return merge_configurations(outcomes, name=args.name, ctx=ctx)


def _emit(text: str) -> None:
    sys.stdout.write(text if text.endswith("\n") else text + "\n")


def _emit_json(data: Dict[str, Any]) -> None:
    _emit(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True, default=str))


def _cmd_validate(args: argparse.Namespace, settings: EngineSettings, ctx: RunContext) -> int:
    outcome = _load_configuration(args, ctx)
    validator = Validator.from_settings(settings, ctx=ctx)
    result = validator.validate(
        outcome.configuration,
        parallel=args.parallel,
        timeout_seconds=args.timeout,
        throttle=args.throttle,
    )
    data = result.to_dict()
    data["parse_warnings"] = list(outcome.warnings)
    if args.json:
        _emit_json(data)
    else:
        _emit(generate_validation_md(data))
    return EXIT_OK if result.is_valid else EXIT_FAILED


def _cmd_apply(args: argparse.Namespace, settings: EngineSettings, ctx: RunContext) -> int:
    outcome = _load_configuration(args, ctx)
    configuration = outcome.configuration

    issues = structural_issues(configuration)
    if issues and not args.force:
        for issue in issues:
            sys.stderr.write(f"statesmith: {issue}\n")
        sys.stderr.write("hint: corrija a declaração ou use --force para aplicar mesmo assim\n")
        return EXIT_FAILED
    for issue in issues:
        ctx.add_warning(scope="cli", message=f"forced past structural issue: {issue}")

    dry_run = settings.execution.dry_run if args.dry_run is None else args.dry_run
    manifest = create_manifest(
        run_id=ctx.run_id,
        started_at=ctx.created_at,
        engine_version=__version__,
        configuration_hash=configuration.content_hash(),
        settings_hash=compute_settings_hash(settings),
        mode="dry-run" if dry_run else "apply",
    )
    executor = Executor.from_settings(settings, ctx=ctx, manifest=manifest)

    try:
        report = executor.execute(
            configuration,
            dry_run=args.dry_run,
            force=args.force,
            include_types=args.include_types,
            exclude_types=args.exclude_types,
        )
    except Exception as e:
        if not is_critical(e):
            raise
        sys.stderr.write(f"statesmith: critical failure, run aborted: {e}\n")
        return EXIT_FAILED
    finally:
        if args.manifest:
            save_manifest(manifest, Path(args.manifest))

    if args.json:
        _emit_json(report.to_dict())
    else:
        _emit(generate_execution_md(report.to_dict(), manifest.to_dict()))
    return EXIT_OK if report.success else EXIT_FAILED


def _cmd_resolve(args: argparse.Namespace, settings: EngineSettings, ctx: RunContext) -> int:
    bridge_settings = replace(
        settings.bridge,
        search_roots=tuple(args.search_root) + settings.bridge.search_roots,
        cache_enabled=settings.bridge.cache_enabled and not args.no_cache,
    )
    bridge = ConfigurationBridge.from_settings(bridge_settings, ctx=ctx)
    try:
        resolution = bridge.resolve_detailed(args.kind, args.key)
    except UnresolvedConfigurationError as e:
        sys.stderr.write(f"statesmith: {e}\n")
        return EXIT_FAILED

    _emit_json(
        {
            "kind": resolution.kind,
            "key": resolution.key,
            "has_baseline": resolution.has_baseline,
            "override_path": str(resolution.override_path) if resolution.override_path else None,
            "payload": resolution.payload,
        }
    )
    return EXIT_OK


_COMMANDS = {
    "validate": _cmd_validate,
    "apply": _cmd_apply,
    "resolve": _cmd_resolve,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = _load_engine_settings(args)
    except (SettingsError, ValueError) as e:
        sys.stderr.write(f"statesmith: invalid settings: {e}\n")
        if isinstance(e, SettingsError) and e.hint:
            sys.stderr.write(f"hint: {e.hint}\n")
        return EXIT_USAGE

    ctx = RunContext.new(settings=settings.to_dict(), command=args.command)
    try:
        return _COMMANDS[args.command](args, settings, ctx)
    except ParseError as e:
        sys.stderr.write(f"statesmith: {e}\n")
        if e.hint:
            sys.stderr.write(f"hint: {e.hint}\n")
        return EXIT_USAGE
    except ValueError as e:
        sys.stderr.write(f"statesmith: {e}\n")
        return EXIT_USAGE


if __name__ == "__main__":
    raise SystemExit(main())
