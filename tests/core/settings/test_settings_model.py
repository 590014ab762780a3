# tests/core/settings/test_settings_model.py
"""
Testes do modelo tipado de settings (EngineSettings).

Este módulo valida que:
- chaves ausentes herdam os defaults embutidos
- valores fora do domínio (timeout, throttle, workers) são rejeitados
- chaves desconhecidas são rejeitadas explicitamente
- filtros include/exclude por tipo são case-insensitive
- `to_dict` produz apenas tipos serializáveis em JSON

Decisões arquiteturais:
    - `SettingsValueError` também é `ValueError`, para que chamadores
      genéricos possam tratá-lo sem conhecer a hierarquia de settings
"""

import json

import pytest

try:
    from statesmith.core.settings import (
        EngineSettings,
        ExecutionSettings,
        SettingsValueError,
        ValidationSettings,
    )
except Exception as e:  # noqa: BLE001
    EngineSettings = None
    ExecutionSettings = None
    SettingsValueError = None
    ValidationSettings = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing settings model. Implement:\n"
            "- src/statesmith/core/settings/model.py (EngineSettings and sections)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_from_empty_dict_uses_defaults():
    _require_imports()
    s = EngineSettings.from_dict({})
    assert s.validation.timeout_seconds == 30
    assert s.validation.parallel is False
    assert s.validation.throttle == 4
    assert s.execution.include_types == ()
    assert s.bridge.cache_enabled is True
    assert s.bridge.product_names == ("statesmith",)


def test_lists_become_tuples():
    _require_imports()
    s = EngineSettings.from_dict({"execution": {"include_types": ["Package", "Command"]}})
    assert s.execution.include_types == ("Package", "Command")


@pytest.mark.parametrize("timeout", [4, 301, 0])
def test_timeout_out_of_range_is_rejected(timeout):
    _require_imports()
    with pytest.raises(SettingsValueError):
        ValidationSettings(timeout_seconds=timeout)


@pytest.mark.parametrize("timeout", [5, 300])
def test_timeout_bounds_are_inclusive(timeout):
    _require_imports()
    assert ValidationSettings(timeout_seconds=timeout).timeout_seconds == timeout


@pytest.mark.parametrize("throttle", [0, 6])
def test_throttle_out_of_range_is_rejected(throttle):
    _require_imports()
    with pytest.raises(ValueError):
        ValidationSettings(throttle=throttle)


def test_batch_settings_are_validated():
    _require_imports()
    with pytest.raises(SettingsValueError):
        ExecutionSettings(batch_workers=0)
    with pytest.raises(SettingsValueError):
        ExecutionSettings(batch_timeout_seconds=0)


def test_unknown_keys_are_rejected():
    _require_imports()
    with pytest.raises(SettingsValueError):
        EngineSettings.from_dict({"validation": {"paralel": True}})


def test_type_filters_are_case_insensitive():
    _require_imports()
    only_pkg = ExecutionSettings(include_types=("package",))
    assert only_pkg.selects("Package") is True
    assert only_pkg.selects("Command") is False

    no_cmd = ExecutionSettings(exclude_types=("COMMAND",))
    assert no_cmd.selects("Command") is False
    assert no_cmd.selects("Package") is True


def test_to_dict_round_trips_and_is_json_serializable():
    _require_imports()
    s = EngineSettings.from_dict({"execution": {"exclude_types": ["Driver"]}})
    data = s.to_dict()
    json.dumps(data)
    assert data["execution"]["exclude_types"] == ["Driver"]
    assert EngineSettings.from_dict(data) == s


def test_out_of_range_value_carries_structured_details():
    """
    Verifica que erros de domínio entram na taxonomia do engine.

    Invariantes:
        - `details` identifica chave, valor recebido e faixa permitida
        - O payload serializável usa o código estável `SETTINGS_ERROR`
    """
    _require_imports()
    from statesmith.core.errors import SETTINGS_ERROR, exception_to_error
    from statesmith.core.exceptions import StatesmithError

    with pytest.raises(SettingsValueError) as info:
        ValidationSettings(timeout_seconds=301)

    err = info.value
    assert isinstance(err, StatesmithError)
    assert err.details == {
        "key": "validation.timeout_seconds",
        "value": 301,
        "allowed": {"min": 5, "max": 300},
    }
    assert err.hint

    payload = exception_to_error(err)
    assert payload.type == SETTINGS_ERROR
    assert payload.details["key"] == "validation.timeout_seconds"
    assert payload.critical is False


def test_unknown_keys_error_lists_allowed_fields():
    _require_imports()
    with pytest.raises(SettingsValueError) as info:
        EngineSettings.from_dict({"bridge": {"cache": False}})
    assert info.value.details["section"] == "bridge"
    assert info.value.details["unknown"] == ["cache"]
    assert "cache_enabled" in info.value.details["allowed"]
