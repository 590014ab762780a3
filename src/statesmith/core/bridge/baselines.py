"""Baselines v1 — definições canônicas fornecidas pelo módulo.

Cada baseline é indexada por `(kind, key)` e serve de base para o overlay
de overrides do usuário. Presets de categoria do catálogo são expostos
como baselines de kind `category`.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Tuple

from statesmith.core.catalog.presets import CATEGORY_PRESETS


THEME_BASELINES: Dict[str, Dict[str, Any]] = {
    "dark": {
        "theme": "dark",
        "colorScheme": "Campbell",
        "font": {"face": "Cascadia Mono", "size": 12},
        "schemes": [
            {"name": "Campbell", "background": "#0C0C0C", "foreground": "#CCCCCC"},
            {"name": "One Half Dark", "background": "#282C34", "foreground": "#DCDFE4"},
        ],
        "keybindings": [
            {"keys": "ctrl+shift+t", "command": "newTab"},
            {"keys": "ctrl+shift+w", "command": "closePane"},
        ],
    },
    "light": {
        "theme": "light",
        "colorScheme": "One Half Light",
        "font": {"face": "Cascadia Mono", "size": 12},
        "schemes": [
            {"name": "One Half Light", "background": "#FAFAFA", "foreground": "#383A42"},
        ],
        "keybindings": [
            {"keys": "ctrl+shift+t", "command": "newTab"},
        ],
    },
}

PROFILE_BASELINES: Dict[str, Dict[str, Any]] = {
    "developer": {
        "profiles": [
            {"guid": "{61c54bbd-c2c6-5271-96e7-009a87ff44bf}", "name": "PowerShell", "hidden": False},
            {"guid": "{0caa0dad-35be-5f56-a8ff-afceeeaa6101}", "name": "Command Prompt", "hidden": False},
        ],
        "defaultProfile": "{61c54bbd-c2c6-5271-96e7-009a87ff44bf}",
    },
    "minimal": {
        "profiles": [
            {"guid": "{61c54bbd-c2c6-5271-96e7-009a87ff44bf}", "name": "PowerShell", "hidden": False},
        ],
        "defaultProfile": "{61c54bbd-c2c6-5271-96e7-009a87ff44bf}",
    },
}


def default_baselines() -> Dict[Tuple[str, str], Dict[str, Any]]:
    out: Dict[Tuple[str, str], Dict[str, Any]] = {}
    for name, preset in CATEGORY_PRESETS.items():
        out[("category", name)] = deepcopy(preset)
    for name, theme in THEME_BASELINES.items():
        out[("theme", name)] = deepcopy(theme)
    for name, profile in PROFILE_BASELINES.items():
        out[("profile", name)] = deepcopy(profile)
    return out
