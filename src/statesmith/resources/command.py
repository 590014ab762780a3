# src/statesmith/resources/command.py
"""
Resource genérico baseado em comandos externos.

É o adaptador mínimo para itens cujo procedimento real vive fora do engine
(gerenciadores de pacote, utilitários do SO): o teste e a convergência são
comandos declarados.

Propriedades:
    - test_command (obrigatória): lista de argumentos; exit code 0 = satisfeito
    - apply_command (obrigatória): lista de argumentos executada no apply
    - state_command (opcional): saída (stdout) vira `output` no snapshot
    - timeout_seconds (opcional): timeout por comando (default 300)
    - restart_required (opcional): propagado para o ApplyOutcome

Invariantes:
    - Comandos são executados sem shell (lista de argumentos)
    - Binário ausente / timeout no teste → False (nunca levanta)
    - Exit code não zero no apply → ApplyError com stderr nos details
"""

from __future__ import annotations

import shlex
import subprocess
from typing import List

from statesmith.core.exceptions import ApplyError
from statesmith.core.resource import ApplyOutcome, BaseResource, StateSnapshot


DEFAULT_COMMAND_TIMEOUT = 300


def _argv(value) -> List[str]:
    if isinstance(value, str):
        return shlex.split(value)
    return [str(v) for v in value]


class CommandResource(BaseResource):

    def _timeout(self) -> float:
        return float(self.prop("timeout_seconds", DEFAULT_COMMAND_TIMEOUT))

    def test(self) -> bool:
        try:
            r = subprocess.run(
                _argv(self.require("test_command")),
                capture_output=True, text=True, timeout=self._timeout(),
            )
        except (OSError, subprocess.TimeoutExpired):
            return False
        return r.returncode == 0

    def apply(self) -> ApplyOutcome:
        argv = _argv(self.require("apply_command"))
        try:
            r = subprocess.run(
                argv,
                capture_output=True, text=True, timeout=self._timeout(),
            )
        except FileNotFoundError as e:
            raise ApplyError(
                f"command not found: {argv[0]}",
                details={"item": self.name, "argv": argv},
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ApplyError(
                f"command timed out after {self._timeout()}s",
                details={"item": self.name, "argv": argv},
            ) from e

        if r.returncode != 0:
            raise ApplyError(
                f"command exited with code {r.returncode}",
                details={
                    "item": self.name,
                    "argv": argv,
                    "returncode": r.returncode,
                    "stderr": (r.stderr or "").strip()[-2000:],
                },
            )

        return ApplyOutcome(
            changed=True,
            restart_required=bool(self.prop("restart_required", False)),
            message=(r.stdout or "").strip().splitlines()[-1] if (r.stdout or "").strip() else "command succeeded",
        )

    def get_current_state(self) -> StateSnapshot:
        state: StateSnapshot = {"satisfied": self.test()}
        state_cmd = self.prop("state_command")
        if state_cmd:
            try:
                r = subprocess.run(
                    _argv(state_cmd),
                    capture_output=True, text=True, timeout=self._timeout(),
                )
                state["output"] = (r.stdout or "").strip()
            except (OSError, subprocess.TimeoutExpired) as e:
                state["output"] = None
                state["error"] = str(e)
        return state
