# src/statesmith/core/bridge/discovery.py
"""
Descoberta e pontuação de arquivos de override do usuário.

Cada raiz de busca tem um peso explícito; cada arquivo candidato recebe
uma pontuação de nome. A pontuação final é a soma das duas.

Pontuação de nome:
    - nome com marca do produto (ex.: `statesmith.yaml`, `.statesmith.json`,
      `statesmith-config.yml`) → BRANDED_NAME_SCORE
    - nome genérico (`config.*`, `settings.*`) dentro de uma pasta do produto
      → GENERIC_NAME_SCORE

Peso de raiz (defaults):
    - perfil do usuário → 30
    - subpastas de dotfiles/config do usuário → 25
    - app-data do usuário → 10
    - app-data da máquina → 0

Decisões arquiteturais:
    - Busca com profundidade limitada: raiz, raiz/<produto>, raiz/.<produto>
    - Empates são resolvidos pelo caminho (ordem lexicográfica) para determinismo
    - Não lê conteúdo de arquivos (ver bridge.ConfigurationBridge)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence


BRANDED_NAME_SCORE = 100
GENERIC_NAME_SCORE = 50

OVERRIDE_SUFFIXES = (".yaml", ".yml", ".json")
GENERIC_STEMS = ("config", "settings")

USER_PROFILE_WEIGHT = 30
USER_DOTFILES_WEIGHT = 25
USER_APPDATA_WEIGHT = 10
MACHINE_APPDATA_WEIGHT = 0


@dataclass(frozen=True)
class SearchRoot:
    path: Path
    weight: int = 0
    label: str = ""


@dataclass(frozen=True)
class OverrideCandidate:
    path: Path
    score: int
    root: SearchRoot


def default_search_roots(env: Optional[Mapping[str, str]] = None) -> List[SearchRoot]:
    """Raízes de busca bem conhecidas, em ordem de prioridade."""
    env = os.environ if env is None else env
    home = Path(env.get("USERPROFILE") or env.get("HOME") or Path.home())

    roots = [
        SearchRoot(home, USER_PROFILE_WEIGHT, "user-profile"),
        SearchRoot(home / ".config", USER_DOTFILES_WEIGHT, "user-config"),
        SearchRoot(home / "dotfiles", USER_DOTFILES_WEIGHT, "user-dotfiles"),
        SearchRoot(home / ".dotfiles", USER_DOTFILES_WEIGHT, "user-dotfiles"),
    ]
    for var in ("APPDATA", "LOCALAPPDATA", "XDG_CONFIG_HOME"):
        if env.get(var):
            roots.append(SearchRoot(Path(env[var]), USER_APPDATA_WEIGHT, f"user-appdata:{var}"))
    if env.get("PROGRAMDATA"):
        roots.append(SearchRoot(Path(env["PROGRAMDATA"]), MACHINE_APPDATA_WEIGHT, "machine-appdata"))
    roots.append(SearchRoot(Path("/etc"), MACHINE_APPDATA_WEIGHT, "machine-etc"))
    return roots


def roots_from_paths(paths: Iterable[str], *, weight: int = USER_PROFILE_WEIGHT) -> List[SearchRoot]:
    """Raízes explícitas (ex.: `bridge.search_roots`), mais prioritárias que as default."""
    return [SearchRoot(Path(p).expanduser(), weight + 10, "explicit") for p in paths]


def _branded_names(product: str) -> List[str]:
    names: List[str] = []
    for suffix in OVERRIDE_SUFFIXES:
        names.extend([
            f"{product}{suffix}",
            f".{product}{suffix}",
            f"{product}-config{suffix}",
            f"{product}.config{suffix}",
            f"{product}-settings{suffix}",
        ])
    return names


def _generic_names() -> List[str]:
    return [f"{stem}{suffix}" for stem in GENERIC_STEMS for suffix in OVERRIDE_SUFFIXES]


def name_score(path: Path, product_names: Sequence[str]) -> int:
    name = path.name.lower()
    for product in product_names:
        if name in {n.lower() for n in _branded_names(product)}:
            return BRANDED_NAME_SCORE
    if name in _generic_names():
        return GENERIC_NAME_SCORE
    return 0


def discover_override_files(
    roots: Sequence[SearchRoot],
    product_names: Sequence[str],
) -> List[OverrideCandidate]:
    """
    Lista arquivos de override existentes, ordenados por pontuação decrescente
    (empate → caminho crescente).
    """
    seen = set()
    found: List[OverrideCandidate] = []

    for root in roots:
        if not root.path.is_dir():
            continue
        for product in product_names:
            folders = [root.path, root.path / product, root.path / f".{product}"]
            for folder in folders:
                if not folder.is_dir():
                    continue
                names = list(_branded_names(product))
                if folder != root.path:
                    names.extend(_generic_names())
                for n in names:
                    candidate = folder / n
                    if not candidate.is_file():
                        continue
                    resolved = candidate.resolve()
                    if resolved in seen:
                        continue
                    seen.add(resolved)
                    found.append(
                        OverrideCandidate(
                            path=candidate,
                            score=name_score(candidate, product_names) + root.weight,
                            root=root,
                        )
                    )

    found.sort(key=lambda c: (-c.score, str(c.path)))
    return found
