# src/statesmith/core/validation/timeout.py
"""
Execução isolada com prazo.

`run_with_timeout` executa uma chamada em uma thread daemon dedicada, ligada
a um `concurrent.futures.Future`, e aguarda o resultado até o prazo. Se o
prazo expira, o chamador recebe um resultado de timeout e segue em frente;
a thread presa não bloqueia o lote nem o encerramento do processo.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, wait
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class TimedCall:
    completed: bool
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def timed_out(self) -> bool:
        return not self.completed


def run_with_timeout(fn: Callable[[], Any], timeout: float, *, name: str = "statesmith-call") -> TimedCall:
    future: Future = Future()

    def _target() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(fn())
        except BaseException as e:  # noqa: BLE001 - repassado ao chamador via TimedCall
            future.set_exception(e)

    threading.Thread(target=_target, name=name, daemon=True).start()

    done, _ = wait([future], timeout=timeout)
    if not done:
        return TimedCall(completed=False)
    error = future.exception()
    if error is not None:
        return TimedCall(completed=True, error=error)
    return TimedCall(completed=True, value=future.result())
