# tests/core/settings/test_settings_merge.py
"""
Testes da política de deep-merge (v1).

Política:
    - dict → merge recursivo
    - list → sobrescrita total
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito
"""

import pytest

try:
    from statesmith.core.settings import SettingsTypeConflictError, deep_merge
except Exception as e:  # noqa: BLE001
    deep_merge = None
    SettingsTypeConflictError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing settings merge modules. Implement:\n"
            "- src/statesmith/core/settings/merge.py (deep_merge)\n"
            "- src/statesmith/core/settings/errors.py (SettingsTypeConflictError)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_merge_simple_override_does_not_mutate_inputs():
    _require_imports()
    base = {"a": 1, "b": 2}
    override = {"b": 99}
    out = deep_merge(base, override)
    assert out == {"a": 1, "b": 99}
    assert base == {"a": 1, "b": 2}
    assert override == {"b": 99}


def test_merge_nested_dict():
    _require_imports()
    base = {"validation": {"parallel": False, "throttle": 4}}
    out = deep_merge(base, {"validation": {"throttle": 2}})
    assert out == {"validation": {"parallel": False, "throttle": 2}}


def test_merge_list_override_total():
    _require_imports()
    base = {"execution": {"include_types": ["Package", "Command"]}}
    out = deep_merge(base, {"execution": {"include_types": ["Command"]}})
    assert out == {"execution": {"include_types": ["Command"]}}


def test_merge_accepts_int_float_pair():
    _require_imports()
    out = deep_merge({"timeout_seconds": 30}, {"timeout_seconds": 12.5})
    assert out == {"timeout_seconds": 12.5}


def test_merge_type_conflict_raises():
    """
    Verifica que um dict não pode ser sobrescrito por um escalar.

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """
    _require_imports()
    with pytest.raises(SettingsTypeConflictError):
        deep_merge({"validation": {"parallel": True}}, {"validation": "fast"})


def test_merge_bool_is_not_numeric():
    _require_imports()
    with pytest.raises(SettingsTypeConflictError):
        deep_merge({"throttle": 4}, {"throttle": True})


def test_type_conflict_reports_key_and_types():
    _require_imports()
    with pytest.raises(SettingsTypeConflictError) as info:
        deep_merge({"execution": {"batch_workers": 4}}, {"execution": {"batch_workers": "many"}})
    assert info.value.details == {"key": "batch_workers", "base_type": "int", "override_type": "str"}
