# tests/core/catalog/test_catalog_parser.py
"""
Testes do Parser de declarações.

Este módulo valida que:
- identificadores nus viram Resources mínimos com `package_id`
- registros heterogêneos são normalizados (campos extras → properties)
- declarações sem `type` (e sem tipo default) falham explicitamente
- arquivos JSON/YAML são carregados; arquivos malformados falham com ParseError
- múltiplas fontes são mescladas item a item, com colisões virando warnings

Invariantes:
    - A primeira declaração de um nome sempre vence
    - Um arquivo malformado nunca produz uma Configuration parcial
"""

import json
from pathlib import Path

import pytest

try:
    from statesmith.core.catalog import (
        load_directory,
        load_file,
        load_sources,
        merge_configurations,
        normalize_declaration,
        parse_document,
        parse_items,
    )
    from statesmith.core.exceptions import ParseError
    from statesmith.resources import JsonSettingsResource, UnboundResource
except Exception as e:  # noqa: BLE001
    load_directory = None
    load_file = None
    load_sources = None
    merge_configurations = None
    normalize_declaration = None
    parse_document = None
    parse_items = None
    ParseError = None
    JsonSettingsResource = None
    UnboundResource = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing catalog parser. Implement:\n"
            "- src/statesmith/core/catalog/parser.py\n"
            "- src/statesmith/resources/__init__.py (default_registry)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


# =====================================================
# Normalização
# =====================================================

def test_bare_identifier_becomes_minimal_package():
    _require_imports()
    decl = normalize_declaration("Git.Git", default_type="Package", defaults={"source": "winget"})
    assert decl == {
        "name": "Git.Git",
        "type": "Package",
        "description": "",
        "enabled": True,
        "properties": {"package_id": "Git.Git", "source": "winget"},
    }


def test_bare_identifier_without_default_type_fails():
    _require_imports()
    with pytest.raises(ParseError):
        normalize_declaration("Git.Git")


def test_extra_fields_move_to_properties_and_aliases_name():
    """
    Verifica a normalização de registros heterogêneos.

    Decisões arquiteturais:
        - Campos fora do schema canônico viram `properties`
        - `PackageId` é aceito como alias de `name`
        - `enabled` textual ("false") é interpretado
    """
    _require_imports()
    decl = normalize_declaration(
        {"PackageId": "VideoLAN.VLC", "type": "Package", "source": "choco", "enabled": "false"},
    )
    assert decl["name"] == "VideoLAN.VLC"
    assert decl["enabled"] is False
    assert decl["properties"]["source"] == "choco"
    assert decl["properties"]["package_id"] == "VideoLAN.VLC"


def test_missing_type_fails():
    _require_imports()
    with pytest.raises(ParseError) as exc:
        normalize_declaration({"name": "git"})
    assert exc.value.details["item"] == "git"


@pytest.mark.parametrize("raw", [{"type": "Package"}, 42, {"name": "x", "type": "Package", "properties": "flat"}])
def test_malformed_records_fail(raw):
    _require_imports()
    with pytest.raises(ParseError):
        normalize_declaration(raw)


# =====================================================
# Documentos e arquivos
# =====================================================

def test_parse_document_builds_resources_from_registry(tmp_path: Path):
    _require_imports()
    outcome = parse_document(
        {
            "name": "workstation",
            "version": "2.0",
            "metadata": {"owner": "ops"},
            "items": [
                {"name": "git", "type": "Package"},
                {"name": "terminal", "type": "TerminalSettings",
                 "properties": {"path": str(tmp_path / "s.json"), "settings": {}}},
            ],
        },
        source="workstation.yaml",
    )
    cfg = outcome.configuration
    assert cfg.name == "workstation"
    assert cfg.version == "2.0"
    assert cfg.metadata["owner"] == "ops"
    assert isinstance(cfg.get("git"), UnboundResource)
    assert isinstance(cfg.get("terminal"), JsonSettingsResource)
    assert outcome.warnings == []


def test_document_level_source_fills_item_defaults():
    _require_imports()
    outcome = parse_document(
        {"source": "winget", "default_type": "Package", "items": ["Git.Git", {"name": "vlc", "source": "choco"}]},
        source="<test>",
    )
    cfg = outcome.configuration
    assert cfg.get("Git.Git").properties["source"] == "winget"
    assert cfg.get("vlc").properties["source"] == "choco"


def test_document_without_items_fails():
    _require_imports()
    with pytest.raises(ParseError):
        parse_document({"name": "x"})


def test_load_yaml_file(tmp_path: Path):
    _require_imports()
    f = tmp_path / "dev.yaml"
    f.write_text("name: dev\nitems:\n  - name: git\n    type: Package\n", encoding="utf-8")
    outcome = load_file(f)
    assert outcome.configuration.name == "dev"
    assert [i.name for i in outcome.configuration.items] == ["git"]
    assert outcome.sources == [str(f)]


def test_load_list_json_file_uses_stem_as_name(tmp_path: Path):
    _require_imports()
    f = _write_json(tmp_path / "tools.json", [{"name": "git", "type": "Package"}])
    assert load_file(f).configuration.name == "tools"


@pytest.mark.parametrize(
    "filename,content",
    [("bad.json", "{not json"), ("bad.yaml", "items: [unclosed"), ("empty.json", ""), ("notes.txt", "hi")],
)
def test_malformed_or_unsupported_files_fail(tmp_path: Path, filename, content):
    _require_imports()
    f = tmp_path / filename
    f.write_text(content, encoding="utf-8")
    with pytest.raises(ParseError):
        load_file(f)


def test_missing_file_fails(tmp_path: Path):
    _require_imports()
    with pytest.raises(ParseError):
        load_file(tmp_path / "nope.json")


# =====================================================
# Merge de fontes
# =====================================================

def test_merge_collision_is_warning_and_first_wins(dummy_ctx):
    """
    Verifica a política de merge de múltiplas fontes.

    Invariantes:
        - A colisão de nome gera um warning não fatal
        - O item da primeira fonte é mantido
        - Itens não colidentes de todas as fontes são incluídos, em ordem
        - O warning é registrado no RunContext (escopo "parser")
    """
    _require_imports()
    a = parse_items([{"name": "git", "type": "Package", "source": "winget"}], name="a", source="a.json")
    b = parse_items(
        [{"name": "git", "type": "Package", "source": "choco"}, {"name": "vlc", "type": "Package"}],
        name="b",
        source="b.json",
    )

    merged = merge_configurations([a, b], ctx=dummy_ctx)
    cfg = merged.configuration

    assert [i.name for i in cfg.items] == ["git", "vlc"]
    assert cfg.get("git").properties["source"] == "winget"
    assert len(merged.warnings) == 1
    assert "git" in merged.warnings[0]
    assert dummy_ctx.warnings["parser"] == merged.warnings
    assert merged.sources == ["a.json", "b.json"]
    assert cfg.name == "a"


def test_duplicate_inside_single_source_is_warning():
    _require_imports()
    outcome = parse_items(
        [{"name": "git", "type": "Package"}, {"name": "git", "type": "Command"}],
        source="one.json",
    )
    assert len(outcome.configuration) == 1
    assert outcome.configuration.get("git").type == "Package"
    assert len(outcome.warnings) == 1


def test_merge_requires_sources():
    _require_imports()
    with pytest.raises(ParseError):
        merge_configurations([])


def test_load_directory_merges_files_in_name_order(tmp_path: Path):
    _require_imports()
    _write_json(tmp_path / "10-base.json", {"items": [{"name": "git", "type": "Package", "source": "winget"}]})
    _write_json(tmp_path / "20-extra.json", {"items": [
        {"name": "git", "type": "Package", "source": "choco"},
        {"name": "vlc", "type": "Package"},
    ]})
    (tmp_path / "README.md").write_text("ignored", encoding="utf-8")

    outcome = load_directory(tmp_path)
    cfg = outcome.configuration
    assert cfg.name == tmp_path.name
    assert [i.name for i in cfg.items] == ["git", "vlc"]
    assert cfg.get("git").properties["source"] == "winget"
    assert len(outcome.warnings) == 1


def test_malformed_file_does_not_shadow_others(tmp_path: Path):
    _require_imports()
    good = _write_json(tmp_path / "good.json", {"items": [{"name": "git", "type": "Package"}]})
    bad = tmp_path / "bad.json"
    bad.write_text("{oops", encoding="utf-8")

    with pytest.raises(ParseError):
        load_sources([good, bad])
    assert len(load_sources([good]).configuration) == 1


def test_empty_directory_fails(tmp_path: Path):
    _require_imports()
    with pytest.raises(ParseError):
        load_directory(tmp_path)
