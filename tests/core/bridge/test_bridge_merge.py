# tests/core/bridge/test_bridge_merge.py
"""
Testes da política de overlay do Bridge.

Este módulo valida que:
- dicionários são sobrepostos recursivamente (override vence)
- listas com chave estável declarada são mescladas por chave
- listas sem chave declarada são substituídas integralmente
- `contains` concorda com `overlay` (overlay de algo contido não muda nada)

Invariantes:
    - Nenhum input é mutado
    - A ordem das entradas não tocadas é preservada
"""

import pytest

try:
    from statesmith.core.bridge import contains, merge_by_key, overlay
except Exception as e:  # noqa: BLE001
    contains = None
    merge_by_key = None
    overlay = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing bridge merge module. Implement:\n"
            "- src/statesmith/core/bridge/merge.py (overlay, merge_by_key, contains)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_nested_overlay_override_wins_and_inputs_untouched():
    _require_imports()
    base = {"font": {"face": "Cascadia Mono", "size": 12}, "theme": "dark"}
    override = {"font": {"size": 14}}
    out = overlay(base, override)
    assert out == {"font": {"face": "Cascadia Mono", "size": 14}, "theme": "dark"}
    assert base["font"]["size"] == 12


def test_keyed_list_merge_updates_in_place_and_appends():
    """
    Verifica o merge de `profiles` por `guid`.

    Invariantes:
        - Entrada com a mesma chave é atualizada in place
        - Entradas não tocadas mantêm a posição
        - Entradas novas vão para o final
    """
    _require_imports()
    base = {"profiles": [
        {"guid": "{a}", "name": "PowerShell", "hidden": False},
        {"guid": "{b}", "name": "cmd", "hidden": False},
    ]}
    override = {"profiles": [
        {"guid": "{b}", "hidden": True},
        {"guid": "{c}", "name": "Ubuntu"},
    ]}
    out = overlay(base, override)
    assert out["profiles"] == [
        {"guid": "{a}", "name": "PowerShell", "hidden": False},
        {"guid": "{b}", "name": "cmd", "hidden": True},
        {"guid": "{c}", "name": "Ubuntu"},
    ]


def test_unkeyed_list_is_replaced():
    _require_imports()
    out = overlay({"plugins": ["a", "b"]}, {"plugins": ["c"]})
    assert out == {"plugins": ["c"]}


def test_type_change_override_wins():
    _require_imports()
    out = overlay({"font": {"face": "x"}}, {"font": "Consolas"})
    assert out == {"font": "Consolas"}


def test_keybindings_keyed_by_keys_with_custom_table():
    _require_imports()
    table = {"bindings": ("keys",)}
    base = [{"keys": "ctrl+t", "command": "newTab"}]
    out = merge_by_key(base, [{"keys": "ctrl+t", "command": "duplicateTab"}, {"command": "noKey"}], ("keys",), table)
    assert out == [{"keys": "ctrl+t", "command": "duplicateTab"}, {"command": "noKey"}]


def test_contains_matches_overlay_semantics():
    _require_imports()
    actual = {"theme": "dark", "profiles": [{"guid": "{a}", "name": "PowerShell", "hidden": False}]}
    assert contains(actual, {"profiles": [{"guid": "{a}", "hidden": False}]}) is True
    assert contains(actual, {"profiles": [{"guid": "{a}", "hidden": True}]}) is False
    assert contains(actual, {"profiles": [{"guid": "{z}"}]}) is False
    assert contains(actual, {"missing": 1}) is False
    assert contains(actual, {}) is True


def test_override_by_secondary_key_updates_existing_entry():
    """
    Verifica que um override identificado só por `name` atualiza o perfil
    do baseline que tem `guid` e `name`.

    Invariantes:
        - Nenhuma entrada duplicada é criada
        - `guid` do baseline é preservado
        - `contains` reconhece o resultado como satisfeito
    """
    _require_imports()
    base = {"profiles": [
        {"guid": "{g1}", "name": "PowerShell", "hidden": False},
        {"guid": "{g2}", "name": "Command Prompt", "hidden": False},
    ]}
    override = {"profiles": [{"name": "PowerShell", "hidden": True}]}

    out = overlay(base, override)

    assert out["profiles"] == [
        {"guid": "{g1}", "name": "PowerShell", "hidden": True},
        {"guid": "{g2}", "name": "Command Prompt", "hidden": False},
    ]
    assert contains(out, override) is True
    assert contains(base, override) is False


def test_preferred_key_wins_over_secondary_key():
    _require_imports()
    base = [
        {"guid": "{g1}", "name": "shell"},
        {"guid": "{g2}", "name": "other"},
    ]
    out = merge_by_key(base, [{"guid": "{g2}", "name": "shell", "hidden": True}], ("guid", "name"))
    assert out == [
        {"guid": "{g1}", "name": "shell"},
        {"guid": "{g2}", "name": "shell", "hidden": True},
    ]
