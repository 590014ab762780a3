# src/statesmith/core/settings/__init__.py

"""
Camada de settings do Statesmith.

Este pacote contém as estruturas e utilitários responsáveis por carregar,
mesclar, validar e identificar as settings de execução do engine
(timeouts de validação, paralelismo, filtros de tipo, cache do Bridge).

Responsabilidades do pacote:
    - Carregamento de arquivos de settings (defaults + overrides locais)
    - Resolução das settings finais via deep-merge determinístico
    - Validação de domínio dos valores (`EngineSettings`)
    - Geração de hash canônico para rastreabilidade

Limites explícitos:
    - Não carrega declarações de recursos (ver core.catalog)
    - Não executa validação ou aplicação
"""

from .errors import (
    SettingsError,
    SettingsNotFoundError,
    UnsupportedSettingsFormatError,
    InvalidSettingsRootTypeError,
    SettingsTypeConflictError,
    SettingsValueError,
)
from .hashing import canonical_json, compute_hash, compute_settings_hash
from .loader import DEFAULT_SETTINGS, load_settings, load_document
from .merge import deep_merge
from .model import EngineSettings, ValidationSettings, ExecutionSettings, BridgeSettings

__all__ = [
    "SettingsError",
    "SettingsNotFoundError",
    "UnsupportedSettingsFormatError",
    "InvalidSettingsRootTypeError",
    "SettingsTypeConflictError",
    "SettingsValueError",
    "canonical_json",
    "compute_hash",
    "compute_settings_hash",
    "DEFAULT_SETTINGS",
    "load_settings",
    "load_document",
    "deep_merge",
    "EngineSettings",
    "ValidationSettings",
    "ExecutionSettings",
    "BridgeSettings",
]
