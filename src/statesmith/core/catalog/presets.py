"""CategoryPresets v1 — catálogos canônicos de pacotes por categoria.

Presets não devem ser ad-hoc nem implícitos. Este componente centraliza:
- a lista de identificadores de pacote por categoria
- a fonte default de cada categoria (explícita)

Cada entrada é uma declaração "nua" (identificador) ou um registro detalhado;
o Parser normaliza ambas as formas, preenchendo `category` e `source`.

Invariantes:
- determinístico (sem acessar o sistema)
- falha explícita para categoria desconhecida
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, List

from statesmith.core.exceptions import ParseError


DEFAULT_SOURCE = "winget"

CATEGORY_PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {
        "description": "Ferramentas essenciais de desenvolvimento",
        "source": DEFAULT_SOURCE,
        "items": [
            "Git.Git",
            "Microsoft.VisualStudioCode",
            "Python.Python.3.12",
            "OpenJS.NodeJS.LTS",
            {"name": "Microsoft.WindowsTerminal", "properties": {"package_id": "Microsoft.WindowsTerminal"}},
        ],
    },
    "productivity": {
        "description": "Aplicativos de produtividade",
        "source": DEFAULT_SOURCE,
        "items": [
            "Microsoft.PowerToys",
            "Notepad++.Notepad++",
            "Obsidian.Obsidian",
        ],
    },
    "media": {
        "description": "Reprodução e edição de mídia",
        "source": DEFAULT_SOURCE,
        "items": [
            "VideoLAN.VLC",
            "GIMP.GIMP",
            "Audacity.Audacity",
        ],
    },
    "utilities": {
        "description": "Utilitários do sistema",
        "source": DEFAULT_SOURCE,
        "items": [
            "7zip.7zip",
            "voidtools.Everything",
            {"name": "Sysinternals", "properties": {"package_id": "Microsoft.Sysinternals", "requires_admin": True}},
        ],
    },
}


def list_presets() -> List[str]:
    return sorted(CATEGORY_PRESETS)


def get_preset(category: str) -> Dict[str, Any]:
    """Retorna uma cópia do preset da categoria.

    Raises:
        ParseError: se a categoria não existir.
    """
    key = category.lower()
    if key not in CATEGORY_PRESETS:
        raise ParseError(
            f"Unknown category preset: {category}",
            details={"category": category, "available": list_presets()},
        )
    return deepcopy(CATEGORY_PRESETS[key])
