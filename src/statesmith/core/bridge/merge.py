# src/statesmith/core/bridge/merge.py
"""
Overlay de payloads do Bridge (baseline + override do usuário).

Política de overlay (v1):
    - dict + dict → overlay recursivo por chave (override vence)
    - list com chave estável declarada → merge por chave:
        * entrada existente (mesma chave) é atualizada in place
        * entrada nova é anexada ao final
        * a ordem das entradas não tocadas é preservada
    - list sem chave declarada → sobrescrita total
    - escalar → sobrescrita direta
    - tipos divergentes → o override vence (arquivos do usuário são soberanos)

Diferente de `settings.merge.deep_merge`, conflitos de tipo não são erro:
overrides do usuário podem trocar a forma de um campo.

Invariantes:
    - Nenhum input é mutado
    - Campos ausentes no override preservam o valor do baseline
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, List, Mapping, Optional, Sequence


# Campos de lista mesclados por chave estável, em ordem de preferência de chave.
DEFAULT_LIST_KEYS: Dict[str, Sequence[str]] = {
    "profiles": ("guid", "name"),
    "list": ("guid", "name"),
    "keybindings": ("keys", "id"),
    "actions": ("keys", "id"),
    "schemes": ("name",),
    "colorSchemes": ("name",),
    "themes": ("name",),
    "items": ("name",),
}


def has_key(entry: Any, key_fields: Sequence[str]) -> bool:
    """True quando a entrada é um dict com ao menos uma chave estável preenchida."""
    return isinstance(entry, dict) and any(entry.get(f) is not None for f in key_fields)


def find_match(entry: Any, candidates: Sequence[Any], key_fields: Sequence[str]) -> Optional[int]:
    """
    Índice da entrada de `candidates` que representa o mesmo item que `entry`.

    Cada campo de `key_fields` é tentado em ordem de preferência contra todas
    as candidatas que também o possuem; o primeiro valor igual vence. Assim um
    override só com `name` casa com um baseline que tem `guid` e `name`.
    """
    if not isinstance(entry, dict):
        return None
    for f in key_fields:
        value = entry.get(f)
        if value is None:
            continue
        for idx, candidate in enumerate(candidates):
            if isinstance(candidate, dict) and candidate.get(f) == value:
                return idx
    return None


def merge_by_key(
    base: List[Any],
    override: List[Any],
    key_fields: Sequence[str],
    list_keys: Optional[Mapping[str, Sequence[str]]] = None,
) -> List[Any]:
    """
    Mescla duas listas por chave estável.

    Entradas do override sem chave reconhecível, ou sem correspondente na
    base, são anexadas ao final.
    """
    result: List[Any] = deepcopy(base)

    for entry in override:
        idx = find_match(entry, result, key_fields)
        if idx is None:
            result.append(deepcopy(entry))
            continue
        current = result[idx]
        if isinstance(current, dict) and isinstance(entry, dict):
            result[idx] = overlay(current, entry, list_keys)
        else:
            result[idx] = deepcopy(entry)

    return result


def overlay(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
    list_keys: Optional[Mapping[str, Sequence[str]]] = None,
) -> Dict[str, Any]:
    """
    Sobrepõe `override` a `base` campo a campo.

    Args:
        base: payload baseline (definição do módulo).
        override: payload do usuário.
        list_keys: tabela campo → chaves estáveis; default `DEFAULT_LIST_KEYS`.

    Returns:
        Dict[str, Any]: novo payload mesclado.
    """
    keys = DEFAULT_LIST_KEYS if list_keys is None else list_keys
    result: Dict[str, Any] = deepcopy(dict(base))

    for field_name, value in override.items():
        current = result.get(field_name)

        if isinstance(current, dict) and isinstance(value, dict):
            result[field_name] = overlay(current, value, keys)
        elif isinstance(current, list) and isinstance(value, list) and field_name in keys:
            result[field_name] = merge_by_key(current, value, keys[field_name], keys)
        else:
            result[field_name] = deepcopy(value)

    return result


def contains(actual: Any, desired: Any, list_keys: Optional[Mapping[str, Sequence[str]]] = None, field_name: str = "") -> bool:
    """
    Verifica se `desired` está contido em `actual` segundo a mesma política
    do overlay: aplicar `overlay(actual, desired)` não mudaria nada.
    """
    keys = DEFAULT_LIST_KEYS if list_keys is None else list_keys

    if isinstance(desired, dict):
        if not isinstance(actual, dict):
            return False
        return all(
            k in actual and contains(actual[k], v, keys, k)
            for k, v in desired.items()
        )

    if isinstance(desired, list) and field_name in keys:
        if not isinstance(actual, list):
            return False
        key_fields = keys[field_name]
        for entry in desired:
            if not has_key(entry, key_fields):
                if entry not in actual:
                    return False
                continue
            idx = find_match(entry, actual, key_fields)
            if idx is None or not contains(actual[idx], entry, keys):
                return False
        return True

    return actual == desired
