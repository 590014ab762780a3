"""
Statesmith — Canonical Error Structures (v1)

Este módulo define o padrão canônico de payloads de erro do Statesmith.
Erros capturados por item (validação ou apply) nunca são descartados
silenciosamente: eles viajam dentro dos resultados como payloads que devem ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import StatesmithError, is_critical


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do Statesmith.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    - critical: indica se a falha abortou a execução
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    critical: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

PARSE_ERROR = "PARSE_ERROR"
DUPLICATE_NAME = "DUPLICATE_NAME"
UNRESOLVED_CONFIGURATION = "UNRESOLVED_CONFIGURATION"
VALIDATION_TIMEOUT = "VALIDATION_TIMEOUT"
VALIDATION_ERROR = "VALIDATION_ERROR"
APPLY_ERROR = "APPLY_ERROR"
CRITICAL_ERROR = "CRITICAL_ERROR"
APPLY_TIMEOUT = "APPLY_TIMEOUT"
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"
SETTINGS_ERROR = "SETTINGS_ERROR"

_CODES_BY_CLASS = {
    "ParseError": PARSE_ERROR,
    "DuplicateNameError": DUPLICATE_NAME,
    "UnresolvedConfigurationError": UNRESOLVED_CONFIGURATION,
    "ValidationTimeoutError": VALIDATION_TIMEOUT,
    "ApplyError": APPLY_ERROR,
    "CriticalError": CRITICAL_ERROR,
}


def exception_to_error(exc: BaseException, *, item: Optional[str] = None) -> ErrorPayload:
    """Converte exceções em ErrorPayload (serializável, acionável).

    Regras:
    - StatesmithError: já vem com message/details/hint/kind.
    - Outras exceções: encapsular como ENGINE_EXECUTION_ERROR sem expor stack trace.
    """
    if isinstance(exc, StatesmithError):
        details = dict(exc.details)
        if item is not None:
            details.setdefault("item", item)
        return ErrorPayload(
            type=getattr(exc, "code", None) or _CODES_BY_CLASS.get(exc.__class__.__name__, exc.__class__.__name__),
            message=str(exc) or "Erro de execução",
            details=details,
            hint=exc.hint,
            critical=is_critical(exc),
        )

    return ErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message=str(exc) or "Erro inesperado durante execução",
        details={
            "exception_class": exc.__class__.__name__,
            "item": item,
        },
        hint="Verifique o log de eventos do run e a declaração do item",
        critical=False,
    )
