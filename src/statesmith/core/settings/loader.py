# src/statesmith/core/settings/loader.py
"""
Loader canônico de settings do Statesmith.

Este módulo é responsável por carregar, validar estruturalmente e resolver
as settings efetivas do engine.

As settings são resolvidas a partir de:
    - `DEFAULT_SETTINGS` embutido no código (sempre presente)
    - um arquivo de defaults do projeto (opcional, mas obrigatório se informado)
    - um arquivo local de overrides (opcional, ignorado se ausente)

Princípios fundamentais:
    - Settings são declarativas e explícitas
    - Erros estruturais são tratados como falhas fatais
    - A mesma entrada sempre produz as mesmas settings finais

Invariantes:
    - O resultado é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults
"""

from pathlib import Path
from typing import Any, Dict, Optional
import json

import yaml  # PyYAML

from .merge import deep_merge
from .errors import (
    SettingsNotFoundError,
    InvalidSettingsRootTypeError,
    UnsupportedSettingsFormatError,
)


DEFAULT_SETTINGS: Dict[str, Any] = {
    "validation": {
        "timeout_seconds": 30,
        "parallel": False,
        "throttle": 4,
        "check_compatibility": True,
        "check_dependencies": True,
        "analyze_performance": True,
    },
    "execution": {
        "dry_run": False,
        "force": False,
        "include_types": [],
        "exclude_types": [],
        "batch_workers": 4,
        "batch_timeout_seconds": 600,
    },
    "bridge": {
        "cache_enabled": True,
        "search_roots": [],
        "product_names": ["statesmith"],
    },
}


def load_document(path: Path) -> Any:
    """
    Lê um documento YAML ou JSON do disco, sem validar o tipo raiz.

    Arquivos vazios são interpretados como `None`.

    Raises:
        FileNotFoundError: Se o arquivo não existir.
        UnsupportedSettingsFormatError: Se a extensão não for suportada.
        yaml.YAMLError / json.JSONDecodeError: Se o conteúdo estiver malformado.
    """
    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)

    if suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            text = f.read()
        return json.loads(text) if text.strip() else None

    raise UnsupportedSettingsFormatError(
        f"Formato não suportado: {path.suffix}",
        details={"path": str(path), "suffix": path.suffix},
    )


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de settings e valida sua estrutura básica.

    Decisões arquiteturais:
        - O arquivo deve existir no momento do carregamento
        - O conteúdo raiz deve ser um dicionário (`dict`)
        - Arquivos vazios são interpretados como dicionários vazios

    Raises:
        SettingsNotFoundError: Se o arquivo não existir.
        UnsupportedSettingsFormatError: Se o formato do arquivo não for suportado.
        InvalidSettingsRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise SettingsNotFoundError(
            f"Arquivo de settings não encontrado: {path}",
            details={"path": str(path)},
        )

    data = load_document(path)

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidSettingsRootTypeError(
            f"Settings root deve ser dict, recebido: {type(data).__name__}",
            details={"path": str(path), "root_type": type(data).__name__},
        )

    return data


def load_settings(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve as settings efetivas do engine.

    Política de resolução:
        - `DEFAULT_SETTINGS` é sempre a base
        - O arquivo de defaults, quando informado, deve existir
        - O arquivo local é opcional e ignorado se ausente
        - Precedência: local > defaults do projeto > DEFAULT_SETTINGS

    Args:
        defaults_path (Optional[str]): Caminho para o arquivo de settings do projeto.
        local_path (Optional[str]): Caminho opcional para overrides locais.

    Returns:
        Dict[str, Any]: Settings finais resolvidas.

    Raises:
        SettingsNotFoundError: Se o arquivo de defaults informado não existir.
        UnsupportedSettingsFormatError: Se o formato do arquivo não for suportado.
        InvalidSettingsRootTypeError: Se o conteúdo não for um dicionário.
        SettingsTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """

    effective = deep_merge(DEFAULT_SETTINGS, {})

    if defaults_path is not None:
        effective = deep_merge(effective, _load_file(Path(defaults_path)))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective
