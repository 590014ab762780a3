# src/statesmith/resources/json_settings.py
"""
Resource de arquivo de settings JSON (terminal, perfis, ferramentas).

Garante que `properties["settings"]` esteja contido no documento JSON em
`properties["path"]`, usando a mesma política de overlay do Bridge
(listas de perfis/keybindings/schemes mescladas por chave estável).

Propriedades:
    - path (obrigatória): caminho do arquivo; `~` é expandido
    - settings (obrigatória): fragmento desejado (dict)
    - list_keys (opcional): tabela campo → chaves estáveis
    - indent (opcional): indentação ao gravar (default 4)

Invariantes:
    - test() não escreve no disco
    - apply() grava de forma atômica (arquivo temporário + replace)
    - Arquivo ausente → snapshot {"exists": False}; test() → False
    - JSON malformado → test() False; apply() levanta ApplyError
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from statesmith.core.bridge.merge import contains, overlay
from statesmith.core.exceptions import ApplyError
from statesmith.core.resource import ApplyOutcome, BaseResource, StateSnapshot


class JsonSettingsResource(BaseResource):

    @property
    def path(self) -> Path:
        return Path(str(self.require("path"))).expanduser()

    @property
    def desired(self) -> Dict[str, Any]:
        settings = self.require("settings")
        if not isinstance(settings, dict):
            raise ValueError(f"Resource '{self.name}': property 'settings' must be a mapping")
        return settings

    def _read(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path}: JSON root must be an object")
        return data

    def test(self) -> bool:
        try:
            current = self._read()
        except (OSError, ValueError):
            return False
        if current is None:
            return False
        return contains(current, self.desired, self.prop("list_keys"))

    def apply(self) -> ApplyOutcome:
        try:
            current = self._read()
        except (OSError, ValueError) as e:
            raise ApplyError(
                f"cannot read settings file {self.path}: {e}",
                details={"item": self.name, "path": str(self.path)},
            ) from e

        base = current or {}
        if current is not None and contains(base, self.desired, self.prop("list_keys")):
            return ApplyOutcome.unchanged("settings already present")

        merged = overlay(base, self.desired, self.prop("list_keys"))
        self._write(merged)
        return ApplyOutcome(changed=True, message=f"updated {self.path}")

    def _write(self, data: Dict[str, Any]) -> None:
        target = self.path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=int(self.prop("indent", 4)), ensure_ascii=False)
                    f.write("\n")
                os.replace(tmp, target)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ApplyError(
                f"cannot write settings file {target}: {e}",
                details={"item": self.name, "path": str(target)},
            ) from e

    def get_current_state(self) -> StateSnapshot:
        try:
            current = self._read()
        except (OSError, ValueError) as e:
            return {"path": str(self.path), "exists": True, "readable": False, "error": str(e)}
        if current is None:
            return {"path": str(self.path), "exists": False}
        return {"path": str(self.path), "exists": True, "settings": current}
