# tests/core/validation/test_validation_recommendations.py
"""Testes das recomendações determinísticas."""

import pytest

try:
    from statesmith.core.validation import (
        CompatibilityReport,
        ItemStatus,
        ItemValidationResult,
        PerformanceImpact,
        build_recommendations,
    )
except Exception as e:  # noqa: BLE001
    CompatibilityReport = None
    ItemStatus = None
    ItemValidationResult = None
    PerformanceImpact = None
    build_recommendations = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing recommendations. Implement:\n"
            "- src/statesmith/core/validation/recommendations.py\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _item(name, status, issues=(), satisfied=None):
    return ItemValidationResult(item_name=name, item_type="Package", status=status, issues=issues, satisfied=satisfied)


def test_clean_result_has_no_recommendations():
    _require_imports()
    assert build_recommendations(item_results=[_item("a", ItemStatus.VALID, satisfied=True)]) == ()


def test_rules_are_ordered_and_deterministic():
    _require_imports()
    items = [
        _item("stuck", ItemStatus.INVALID, ("validation timeout",)),
        _item("drift", ItemStatus.WARNING, ("not in desired state",), satisfied=False),
    ]
    compat = CompatibilityReport(
        compatible=False,
        reasons=("elevated privileges required by: wsl", "python 3.8 is older than required 3.9"),
        elevated=False,
        elevation_required_by=("wsl",),
    )
    perf = PerformanceImpact(estimated_duration=2400, high_count=6, requires_reboot=True, requires_network=True)

    kwargs = dict(item_results=items, compatibility=compat, performance=perf)
    out = build_recommendations(**kwargs)

    assert out == (
        "Fix 1 invalid item(s) before applying",
        "Investigate unresponsive resources: stuck",
        "Run with elevated privileges",
        "Resolve system compatibility issues: python 3.8 is older than required 3.9",
        "Apply the configuration to converge 1 item(s)",
        "Plan for a system restart after applying",
        "Ensure network connectivity while applying",
        "Split the configuration into smaller batches (estimated 40 min)",
    )
    assert build_recommendations(**kwargs) == out


def test_many_high_impact_items_suggest_maintenance_window():
    _require_imports()
    perf = PerformanceImpact(estimated_duration=600, high_count=5)
    out = build_recommendations(item_results=[], performance=perf)
    assert out == ("Schedule the 5 high-impact items during a maintenance window",)
