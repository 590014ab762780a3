# tests/core/resource/test_resource_registry.py
"""
Testes do ResourceRegistry.

Invariantes:
    - A busca por tipo é case-insensitive
    - Registro duplicado é erro explícito (nunca substitui em silêncio)
    - Tipos sem fábrica usam o fallback; sem fallback → KeyError
    - A ordem de registro é preservada
"""

import pytest

try:
    from statesmith.core.resource import BaseResource, DuplicateResourceTypeError, ResourceRegistry
    from statesmith.resources import InMemoryResource
except Exception as e:  # noqa: BLE001
    BaseResource = None
    InMemoryResource = None
    DuplicateResourceTypeError = None
    ResourceRegistry = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing resource registry. Implement:\n"
            "- src/statesmith/core/resource/registry.py (ResourceRegistry)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_register_and_create_case_insensitive():
    _require_imports()
    reg = ResourceRegistry()
    reg.register("Package", InMemoryResource)

    r = reg.create(name="git", type="package", properties={"package_id": "Git.Git"})
    assert isinstance(r, BaseResource)
    assert r.type == "package"
    assert r.prop("package_id") == "Git.Git"
    assert reg.has("PACKAGE")


def test_duplicate_registration_is_rejected():
    _require_imports()
    reg = ResourceRegistry()
    reg.register("Package", InMemoryResource)
    with pytest.raises(DuplicateResourceTypeError):
        reg.register("package", InMemoryResource)


def test_unknown_type_without_fallback_raises():
    _require_imports()
    with pytest.raises(KeyError):
        ResourceRegistry().create(name="x", type="Driver")


def test_unknown_type_uses_fallback():
    _require_imports()
    reg = ResourceRegistry(fallback=InMemoryResource)
    r = reg.create(name="nvidia", type="Driver")
    assert r.name == "nvidia"
    assert r.type == "Driver"


def test_types_preserve_registration_order():
    _require_imports()
    reg = ResourceRegistry()
    for t in ("Command", "Package", "JsonSettings"):
        reg.register(t, InMemoryResource)
    assert reg.types() == ["Command", "Package", "JsonSettings"]


def test_empty_type_is_rejected():
    _require_imports()
    with pytest.raises(ValueError):
        ResourceRegistry().register("  ", InMemoryResource)
