# src/statesmith/core/settings/hashing.py
"""
Hashing canônico de settings e de Configurations serializadas.

Os hashes entram em `RunManifest.inputs` (`settings_hash`,
`configuration_hash`) e permitem responder "este run usou exatamente as
mesmas entradas que aquele?" sem guardar o conteúdo.

Forma canônica:
    - JSON com chaves ordenadas e separadores compactos, UTF-8
    - Enum → `.value`, Path → string POSIX, set/frozenset → lista ordenada,
      date/datetime (datas sem aspas no YAML) → ISO 8601,
      tupla → lista (settings tipadas usam tuplas, YAML produz listas)
    - qualquer outro tipo não serializável é rejeitado (nunca `str()` implícito)
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from enum import Enum
from pathlib import PurePath
from typing import Any, Mapping, Union

from .model import EngineSettings


def _canonical_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, PurePath):
        return value.as_posix()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    raise TypeError(f"Valor não serializável para hashing: {type(value).__name__}")


def canonical_json(data: Any) -> str:
    """Serialização determinística usada por todos os hashes do engine."""
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_canonical_default,
    )


def compute_hash(data: Any) -> str:
    """SHA-256 hexadecimal (64 caracteres) de `canonical_json(data)`."""
    return hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()


def compute_settings_hash(settings: Union[EngineSettings, Mapping[str, Any]]) -> str:
    """
    Hash das settings efetivas de um run.

    Aceita `EngineSettings` ou o dicionário equivalente; ambos produzem o
    mesmo hash, já que `EngineSettings.to_dict()` é a forma canônica.

    Raises:
        TypeError: Se o objeto não for `EngineSettings` nem um mapeamento.
    """
    if isinstance(settings, EngineSettings):
        return compute_hash(settings.to_dict())
    if not isinstance(settings, Mapping):
        raise TypeError(
            f"Settings para hashing devem ser EngineSettings ou dict, recebido: {type(settings).__name__}"
        )
    return compute_hash(dict(settings))
