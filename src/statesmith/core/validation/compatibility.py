# src/statesmith/core/validation/compatibility.py
"""
Checagem de compatibilidade do sistema.

Verifica, de forma determinística e injetável:
    - plataforma suportada
    - versão mínima do interpretador
    - versão mínima do sistema operacional (por plataforma)
    - privilégio elevado quando algum item declarado o exige

`PlatformInfo` e a verificação de elevação podem ser injetados para testes;
por padrão são obtidos do processo atual.
"""

from __future__ import annotations

import os
import platform
import re
import sys
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple

from .types import CompatibilityReport


SUPPORTED_PLATFORMS: Tuple[str, ...] = ("Windows", "Linux", "Darwin")
MIN_PYTHON: Tuple[int, int] = (3, 9)
MIN_OS_VERSIONS: Mapping[str, Tuple[int, ...]] = {"Windows": (10, 0)}

ELEVATION_REQUIRED_TYPES = frozenset({"FeatureToggle", "RegistryLikeSetting", "Telemetry", "Driver"})

_LEADING_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class PlatformInfo:
    system: str
    version: str
    python: Tuple[int, int]

    @classmethod
    def current(cls) -> "PlatformInfo":
        return cls(
            system=platform.system(),
            version=platform.version() if platform.system() == "Windows" else platform.release(),
            python=(sys.version_info.major, sys.version_info.minor),
        )


def detect_elevation() -> bool:
    """Retorna True quando o processo atual roda com privilégio administrativo."""
    geteuid = getattr(os, "geteuid", None)
    if geteuid is not None:
        return geteuid() == 0
    try:
        import ctypes

        return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
    except (AttributeError, OSError):
        return False


def parse_version(text: str) -> Tuple[int, ...]:
    parts = []
    for chunk in str(text).replace("-", ".").split("."):
        m = _LEADING_DIGITS.match(chunk)
        if m is None:
            break
        parts.append(int(m.group(0)))
    return tuple(parts)


def requires_elevation(resource: Any) -> bool:
    props = getattr(resource, "properties", {}) or {}
    if "requires_admin" in props:
        return bool(props["requires_admin"])
    return str(resource.type).lower() in {t.lower() for t in ELEVATION_REQUIRED_TYPES}


def check_compatibility(
    resources: Iterable[Any],
    *,
    platform_info: Optional[PlatformInfo] = None,
    elevation_check: Optional[Callable[[], bool]] = None,
    supported_platforms: Tuple[str, ...] = SUPPORTED_PLATFORMS,
    min_python: Tuple[int, int] = MIN_PYTHON,
    min_os_versions: Mapping[str, Tuple[int, ...]] = MIN_OS_VERSIONS,
) -> CompatibilityReport:
    info = platform_info or PlatformInfo.current()
    reasons = []

    if info.system not in supported_platforms:
        reasons.append(f"unsupported platform: {info.system}")

    if tuple(info.python) < tuple(min_python):
        reasons.append(
            f"python {'.'.join(map(str, info.python))} is older than required "
            f"{'.'.join(map(str, min_python))}"
        )

    floor = min_os_versions.get(info.system)
    if floor is not None:
        found = parse_version(info.version)
        if found and found < tuple(floor):
            reasons.append(
                f"{info.system} version {info.version} is older than required {'.'.join(map(str, floor))}"
            )

    needing = tuple(r.name for r in resources if r.enabled and requires_elevation(r))
    elevated: Optional[bool] = None
    if needing:
        elevated = bool((elevation_check or detect_elevation)())
        if not elevated:
            reasons.append(f"elevated privileges required by: {', '.join(needing)}")

    return CompatibilityReport(
        compatible=not reasons,
        reasons=tuple(reasons),
        platform=f"{info.system} {info.version}".strip(),
        elevated=elevated,
        elevation_required_by=needing,
    )
