# src/statesmith/core/settings/merge.py
"""
Utilitário canônico de deep-merge.

Este módulo implementa a política oficial de deep-merge utilizada pelo
Statesmith para resolver as settings efetivas (defaults + local) e para
sobrepor payloads de configuração em recursos de arquivo.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito

Invariantes:
    - A mesma entrada sempre produz a mesma saída
    - Chaves não sobrescritas são preservadas
    - Nenhum input é mutado durante o processo

O merge de listas por chave estável (usado pelo Bridge) vive em
`statesmith.core.bridge.merge` e não altera esta política.
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import SettingsTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários.

    Política de merge (v1):
        - dict + dict → merge recursivo por chave
        - list        → sobrescrita total
        - escalar     → sobrescrita direta pelo override
        - conflito de tipos → erro estrutural explícito

    Args:
        base (Dict[str, Any]): Estrutura base (ex.: defaults).
        override (Dict[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Nova estrutura resultante do deep-merge.

    Raises:
        SettingsTypeConflictError: Se ocorrer conflito de tipo entre base e override.
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise SettingsTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}",
            details={"base_type": type(base).__name__, "override_type": type(override).__name__},
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        # dict -> merge recursivo
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        # list -> sobrescrita total
        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # None na base aceita qualquer override
        if base_value is None or override_value is None:
            result[key] = deepcopy(override_value)
            continue

        if type(base_value) is not type(override_value) and not _numeric_pair(base_value, override_value):
            raise SettingsTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}",
                details={
                    "key": key,
                    "base_type": type(base_value).__name__,
                    "override_type": type(override_value).__name__,
                },
            )

        result[key] = deepcopy(override_value)

    return result


def _numeric_pair(a: Any, b: Any) -> bool:
    # int <-> float é aceito (ex.: timeout_seconds: 30 -> 12.5); bool não é numérico aqui
    return (
        isinstance(a, (int, float))
        and isinstance(b, (int, float))
        and not isinstance(a, bool)
        and not isinstance(b, bool)
    )
