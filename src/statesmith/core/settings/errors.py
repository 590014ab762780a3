# src/statesmith/core/settings/errors.py
"""
Exceções da camada de settings do Statesmith.

As settings controlam o próprio engine (timeouts de validação, paralelismo,
filtros de tipo, workers do lote, raízes de busca do Bridge). Um erro aqui
impede o run antes de qualquer item ser testado ou aplicado, por isso a
família inteira:
    - herda de `StatesmithError` e carrega `details` estruturados
      (`path`, `key`, `value`, `allowed`) e um `hint` acionável
    - é mapeada para o código estável `SETTINGS_ERROR` em `ErrorPayload`
    - vira exit code 2 na CLI

Cada subclasse define um `default_hint`, usado quando o ponto de
levantamento não informa um mais específico.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from statesmith.core.exceptions import StatesmithError


class SettingsError(StatesmithError):
    """Base de todos os erros de settings do engine."""

    code = "SETTINGS_ERROR"
    default_hint: Optional[str] = "Revise o arquivo de settings informado em --settings/--local."

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message, details=details, hint=hint or self.default_hint)


class SettingsNotFoundError(SettingsError):
    """O arquivo de defaults informado não existe (nunca é criado implicitamente)."""

    default_hint = "Informe um caminho existente ou omita --settings para usar os defaults embutidos."


class UnsupportedSettingsFormatError(SettingsError):
    """Extensão diferente de .yaml, .yml ou .json."""

    default_hint = "Use um arquivo .yaml, .yml ou .json."


class InvalidSettingsRootTypeError(SettingsError):
    """O documento de settings não é um mapeamento na raiz."""

    default_hint = "O documento deve ser um mapeamento com as seções validation/execution/bridge."


class SettingsTypeConflictError(SettingsError):
    """
    Override local com forma incompatível com a base no deep-merge.

    Ex.: base `{"validation": {"parallel": true}}` e override
    `{"validation": "fast"}`. Nenhum merge parcial é produzido.
    """

    default_hint = "O override local deve manter o tipo de cada chave da base."


class SettingsValueError(SettingsError, ValueError):
    """Valor fora do domínio permitido (ex.: `validation.timeout_seconds` fora de [5, 300])."""

    default_hint = None
