# tests/core/resource/test_resource_base.py
"""
Testes do contrato canônico de Resource.

Este módulo valida que:
- `BaseResource` é abstrata e exige `name` e `type` não vazios
- a identidade (name/type) é imutável após a construção
- `properties` é exposto somente-leitura e desacoplado do dict original
- objetos duck-typed satisfazem o protocolo `Resource`
- `ApplyOutcome` é imutável e tem defaults explícitos

Decisões arquiteturais:
    - O contrato é verificado por duck typing (`@runtime_checkable`)
    - Resources não dependem de Validator ou Executor
"""

import pytest

try:
    from statesmith.core.resource import ApplyOutcome, BaseResource, Resource, ResourceType
except Exception as e:  # noqa: BLE001
    ApplyOutcome = None
    BaseResource = None
    Resource = None
    ResourceType = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None

    class _Noop(BaseResource):
        def test(self):
            return True

        def apply(self):
            return ApplyOutcome()

        def get_current_state(self):
            return None


def _require_imports():
    """
    Garante que o contrato de Resource esteja disponível para os testes.

    Falha imediatamente quando `statesmith.core.resource` não pode ser
    importado, com uma mensagem que aponta os módulos esperados.
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing resource contract modules. Implement:\n"
            "- src/statesmith/core/resource/types.py (ApplyOutcome, ResourceType)\n"
            "- src/statesmith/core/resource/base.py (Resource, BaseResource)\n"
            f"Import error: {_IMPORT_ERR}"
        )


@pytest.mark.parametrize("name,type_", [("", "Package"), ("   ", "Package"), ("git", ""), ("git", None)])
def test_identity_must_be_non_empty(name, type_):
    _require_imports()
    with pytest.raises(ValueError):
        _Noop(name=name, type=type_)


def test_identity_is_immutable():
    """
    Verifica que `name` e `type` não podem ser reatribuídos.

    Invariantes:
        - A identidade de um item é fixada na construção
        - `enabled` e `description` permanecem mutáveis
    """
    _require_imports()
    r = _Noop(name="git", type="Package")
    with pytest.raises(AttributeError):
        r.name = "other"
    with pytest.raises(AttributeError):
        r.type = "Command"
    r.enabled = False
    assert r.enabled is False


def test_properties_are_read_only_and_copied():
    _require_imports()
    props = {"package_id": "Git.Git"}
    r = _Noop(name="git", type="Package", properties=props)
    props["package_id"] = "changed"

    assert r.properties["package_id"] == "Git.Git"
    assert r.prop("missing", "fallback") == "fallback"
    with pytest.raises(TypeError):
        r.properties["package_id"] = "x"


def test_require_missing_property_raises_key_error():
    _require_imports()
    r = _Noop(name="git", type="Package")
    with pytest.raises(KeyError):
        r.require("package_id")


def test_to_declaration_shape():
    _require_imports()
    r = _Noop(name="git", type="Package", description="VCS", properties={"source": "winget"})
    assert r.to_declaration() == {
        "name": "git",
        "type": "Package",
        "description": "VCS",
        "enabled": True,
        "properties": {"source": "winget"},
    }


def test_base_resource_cannot_be_instantiated():
    _require_imports()
    with pytest.raises(TypeError):
        BaseResource(name="git", type="Package")


def test_subclass_missing_an_operation_fails_at_construction():
    """
    Verifica que uma subclasse incompleta é rejeitada antes de chegar ao engine.

    Invariantes:
        - O erro ocorre na construção, não na primeira chamada de `apply()`
    """
    _require_imports()

    class _NoApply(BaseResource):
        def test(self):
            return True

        def get_current_state(self):
            return None

    with pytest.raises(TypeError, match="apply"):
        _NoApply(name="git", type="Package")


def test_duck_typed_resource_satisfies_protocol(FakeResource):
    _require_imports()
    assert isinstance(FakeResource("git"), Resource)
    assert isinstance(_Noop(name="git", type="Package"), Resource)
    assert not isinstance(object(), Resource)


def test_apply_outcome_defaults_and_immutability():
    _require_imports()
    out = ApplyOutcome()
    assert out.changed is True
    assert out.restart_required is False

    same = ApplyOutcome.unchanged()
    assert same.changed is False
    assert same.message == "no change"

    with pytest.raises(Exception):
        out.changed = False


def test_resource_type_values_are_strings():
    _require_imports()
    assert ResourceType.PACKAGE == "Package"
    assert ResourceType("FeatureToggle") is ResourceType.FEATURE_TOGGLE
