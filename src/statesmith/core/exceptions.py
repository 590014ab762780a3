"""
Statesmith — Canonical Exceptions (v1)

Este módulo define a hierarquia de exceções tipadas do Statesmith.

Objetivo:
- Permitir que Parser, Bridge, Validator e Executor levantem exceções semânticas
- Facilitar o mapeamento determinístico para ErrorPayload
- Classificar falhas por `ErrorKind` explícito (nunca por texto de mensagem)

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Falhas por item são capturadas em resultados; apenas falhas estruturais
  ou críticas propagam para o chamador.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """
    Classificação explícita de severidade de uma falha.

    - RECOVERABLE: falha restrita a um item; o lote continua
    - CRITICAL: falha que aborta a execução inteira
    """

    RECOVERABLE = "recoverable"
    CRITICAL = "critical"


class StatesmithError(Exception):
    """Base class para exceções internas do Statesmith.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    kind: ErrorKind = ErrorKind.RECOVERABLE

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.hint = hint

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Declarações / Catálogo
# ---------------------------------------------------------------------------

class ParseError(StatesmithError):
    """Declaração ilegível, malformada ou sem campo discriminador obrigatório."""


class DuplicateNameError(StatesmithError):
    """Item com `name` já presente na Configuration de destino."""


# ---------------------------------------------------------------------------
# Bridge
# ---------------------------------------------------------------------------

class UnresolvedConfigurationError(StatesmithError):
    """Nenhum baseline nem override existe para o par (kind, key) solicitado."""


# ---------------------------------------------------------------------------
# Validação / Execução
# ---------------------------------------------------------------------------

class ValidationTimeoutError(StatesmithError):
    """`test()` de um item excedeu o timeout de validação."""


class ParallelExecutionError(StatesmithError):
    """Falha sistêmica do mecanismo paralelo (não de um item isolado)."""


class ApplyError(StatesmithError):
    """Falha de convergência de um único recurso."""


class CriticalError(ApplyError):
    """Falha classificada como crítica: aborta a execução inteira."""

    kind = ErrorKind.CRITICAL


def is_critical(exc: BaseException) -> bool:
    """Retorna True quando a exceção é classificada como `ErrorKind.CRITICAL`."""
    return getattr(exc, "kind", None) is ErrorKind.CRITICAL
