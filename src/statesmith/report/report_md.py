"""
src/statesmith/report/report_md.py

Geradores de relatório Markdown do Statesmith.

Regras:
- Relatórios são derivados EXCLUSIVAMENTE dos dicts de resultado
  (`ValidationResult.to_dict()`, `ExecutionReport.to_dict()`, `RunManifest.to_dict()`).
- Não inferem nem recalculam valores.
- Mesmo resultado => mesmo Markdown (ordenação estável).
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional


VALIDATION_SECTIONS: List[str] = [
    "# Validation Report",
    "## Summary",
    "## Items",
    "## Issues",
    "## Recommendations",
]

EXECUTION_SECTIONS: List[str] = [
    "# Execution Report",
    "## Summary",
    "## Items",
    "## Failures",
]


def _as_pretty_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True, indent=2, default=str)


def _require(data: Dict[str, Any], what: str) -> Dict[str, Any]:
    if not isinstance(data, dict) or not data:
        raise ValueError(f"{what} is required to generate a report")
    return data


def _check_sections(content: str, sections: List[str]) -> str:
    for sec in sections:
        if sec not in content:
            raise RuntimeError(f"Report generation failed: missing required section: {sec}")
    return content


def _cell(value: Any) -> str:
    return str(value).replace("|", "\\|").replace("\n", " ")


def generate_validation_md(result: Dict[str, Any]) -> str:
    """Gera o relatório Markdown de um ValidationResult serializado."""
    result = _require(result, "ValidationResult")
    counts = result.get("counts") or {}
    items = result.get("item_results") or []

    lines: List[str] = ["# Validation Report\n"]

    lines.append("## Summary")
    lines.append(f"- **Configuration**: `{result.get('configuration_name', '<unknown>')}`")
    lines.append(f"- **Overall Status**: `{result.get('overall_status', '<unknown>')}`")
    lines.append(f"- **Mode**: `{result.get('mode', '<unknown>')}`")
    lines.append(
        f"- **Items**: {counts.get('total', 0)} total, {counts.get('valid', 0)} valid, "
        f"{counts.get('warning', 0)} warning, {counts.get('invalid', 0)} invalid"
    )
    if result.get("system_compatible") is not None:
        lines.append(f"- **System Compatible**: `{result['system_compatible']}`")
    if result.get("dependencies_valid") is not None:
        lines.append(f"- **Dependencies Valid**: `{result['dependencies_valid']}`")
    perf = result.get("performance_impact")
    if isinstance(perf, dict):
        lines.append(
            f"- **Estimated Duration**: {perf.get('estimated_duration', 0):.0f}s "
            f"(high: {perf.get('high_count', 0)}, medium: {perf.get('medium_count', 0)}, "
            f"low: {perf.get('low_count', 0)})"
        )
    lines.append("")

    lines.append("## Items")
    if items:
        lines.append("| Item | Type | Status | Issues |")
        lines.append("|---|---|---|---|")
        for r in items:
            issues = "; ".join(r.get("issues") or []) or "-"
            lines.append(
                f"| {_cell(r.get('item_name'))} | {_cell(r.get('item_type'))} | "
                f"{_cell(r.get('status'))} | {_cell(issues)} |"
            )
    else:
        lines.append("No items were tested.")
    lines.append("")

    lines.append("## Issues")
    issues = result.get("issues") or []
    if issues:
        lines.extend(f"- {i}" for i in issues)
    else:
        lines.append("No global issues.")
    lines.append("")

    lines.append("## Recommendations")
    recs = result.get("recommendations") or []
    if recs:
        lines.extend(f"- {r}" for r in recs)
    else:
        lines.append("No recommendations.")

    return _check_sections("\n".join(lines), VALIDATION_SECTIONS)


def generate_execution_md(report: Dict[str, Any], manifest: Optional[Dict[str, Any]] = None) -> str:
    """Gera o relatório Markdown de um ExecutionReport serializado (manifest opcional)."""
    report = _require(report, "ExecutionReport")
    summary = report.get("summary") or {}
    results = report.get("results") or []

    lines: List[str] = ["# Execution Report\n"]

    lines.append("## Summary")
    lines.append(f"- **Configuration**: `{report.get('configuration_name', '<unknown>')}`")
    flags = [name for name in ("dry_run", "force") if report.get(name)]
    lines.append(f"- **Flags**: `{', '.join(flags) or 'none'}`")
    lines.append(
        f"- **Items**: {summary.get('total', 0)} total, {summary.get('succeeded', 0)} succeeded, "
        f"{summary.get('failed', 0)} failed, {summary.get('skipped', 0)} skipped"
    )
    lines.append(
        f"- **Applied**: {summary.get('applied', 0)} "
        f"(already satisfied: {summary.get('already_satisfied', 0)}, "
        f"would apply: {summary.get('would_apply', 0)})"
    )
    if summary.get("restart_required"):
        lines.append(f"- **Restart Required**: {summary['restart_required']} item(s)")
    lines.append(
        f"- **Duration**: {summary.get('total_duration', 0.0):.2f}s total, "
        f"{summary.get('average_duration', 0.0):.2f}s average, "
        f"{summary.get('throughput', 0.0):.2f} items/s"
    )
    lines.append("")

    lines.append("## Items")
    if results:
        lines.append("| Item | Type | Result | Message | Duration |")
        lines.append("|---|---|---|---|---|")
        for r in results:
            outcome = "ok" if r.get("success") else "FAILED"
            lines.append(
                f"| {_cell(r.get('item_name'))} | {_cell(r.get('item_type'))} | {outcome} | "
                f"{_cell(r.get('message', ''))} | {float(r.get('duration') or 0.0):.2f}s |"
            )
    else:
        lines.append("No items were executed.")
    lines.append("")

    lines.append("## Failures")
    failures = [r for r in results if not r.get("success")]
    if failures:
        for r in failures:
            lines.append(f"### {r.get('item_name')}")
            lines.append("```json")
            lines.append(_as_pretty_json(r.get("error")))
            lines.append("```")
    else:
        lines.append("No failures.")

    if isinstance(manifest, dict) and manifest:
        lines.append("")
        lines.append("## Traceability")
        lines.append(f"- **Run ID**: `{(manifest.get('run') or {}).get('run_id', '<unknown>')}`")
        lines.append(f"- Events recorded: `{len(manifest.get('events') or [])}`")
        lines.append("### inputs")
        lines.append("```json")
        lines.append(_as_pretty_json(manifest.get("inputs") or {}))
        lines.append("```")

    return _check_sections("\n".join(lines), EXECUTION_SECTIONS)
