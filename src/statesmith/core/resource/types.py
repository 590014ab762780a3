# src/statesmith/core/resource/types.py
"""
Tipos canônicos de recursos do Statesmith.

Este módulo define os enums e estruturas fundamentais que padronizam
a comunicação entre Resources, Validator e Executor.

Componentes principais:
    - ResourceType → valores canônicos do discriminador `type`
    - ApplyOutcome → resultado imutável de um `apply()`
    - StateSnapshot → alias para o snapshot opaco de `get_current_state()`

Invariantes:
    - Enums possuem valores textuais canônicos
    - ApplyOutcome é imutável
    - Tipos não dependem de engine, validator ou UI
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


StateSnapshot = Dict[str, Any]


class ResourceType(str, Enum):
    """
    Valores canônicos do discriminador `type` de um Resource.

    O conjunto é aberto: declarações podem usar tipos fora deste enum,
    que são tratados como strings livres pelo registry (e recebem o
    peso default na análise de performance).

    Os valores são strings para facilitar:
        - serialização em JSON/YAML
        - comparação direta com o campo `type` das declarações
    """
    PACKAGE = "Package"
    FEATURE_TOGGLE = "FeatureToggle"
    REGISTRY_SETTING = "RegistryLikeSetting"
    TERMINAL_SETTINGS = "TerminalSettings"
    PROFILE_SETTINGS = "ProfileSettings"
    JSON_SETTINGS = "JsonSettings"
    TELEMETRY = "Telemetry"
    DRIVER = "Driver"
    COMMAND = "Command"


@dataclass(frozen=True)
class ApplyOutcome:
    """
    Resultado imutável de um `apply()`.

    Informações esperadas e recuperáveis (ex.: reinício necessário) viajam
    aqui, nunca via exceção.

    Campos:
        - changed: o apply alterou estado observável
        - restart_required: a mudança só vale após reinício
        - message: resumo curto para o resultado de execução
    """
    changed: bool = True
    restart_required: bool = False
    message: str = ""

    @classmethod
    def unchanged(cls, message: str = "no change") -> "ApplyOutcome":
        return cls(changed=False, message=message)
