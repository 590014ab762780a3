"""BatchApplier — aplicação concorrente de itens independentes (ex.: pacotes).

Cada item roda `Executor.execute_item` em um worker de um
`ThreadPoolExecutor` limitado. O lote é aguardado com prazo único:
itens não concluídos no prazo viram resultado de falha "batch timeout".

Os resultados seguem a ordem de entrada. Uma falha crítica em qualquer
worker é relançada após o lote ser coletado.

Itens que estouram o prazo são abandonados via `Executor.abandon`: o
manifest registra a falha APPLY_TIMEOUT e o desfecho tardio do worker não
é mais gravado. Python não interrompe threads, então o worker continua até
`apply()` retornar, e a saída do processo espera por ele (workers do
`ThreadPoolExecutor` não são daemon). Resources de longa duração devem
impor seus próprios timeouts (ver `CommandResource`).
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, List, Optional, Sequence

from statesmith.core.context import RunContext
from statesmith.core.errors import APPLY_TIMEOUT, ErrorPayload
from statesmith.core.settings import ExecutionSettings

from .executor import Executor
from .types import ExecutionResult


SCOPE = "batch"

BATCH_TIMEOUT = "batch timeout"


class BatchApplier:
    def __init__(
        self,
        executor: Optional[Executor] = None,
        *,
        max_workers: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> None:
        self.executor = executor or Executor(ctx=ctx)
        settings: ExecutionSettings = self.executor.settings
        self.max_workers = settings.batch_workers if max_workers is None else max_workers
        self.timeout_seconds = settings.batch_timeout_seconds if timeout_seconds is None else timeout_seconds
        self.ctx = ctx if ctx is not None else self.executor.ctx
        if self.max_workers < 1:
            raise ValueError(f"max_workers deve ser >= 1, recebido: {self.max_workers}")

    def _timeout_result(self, resource: Any) -> ExecutionResult:
        payload = ErrorPayload(
            type=APPLY_TIMEOUT,
            message=BATCH_TIMEOUT,
            details={"item": resource.name, "timeout_seconds": self.timeout_seconds},
            hint="Aumente execution.batch_timeout_seconds ou aplique o item isoladamente.",
        )
        return ExecutionResult(
            item_name=resource.name,
            item_type=str(resource.type),
            success=False,
            message=BATCH_TIMEOUT,
            duration=self.timeout_seconds,
            error=payload.to_dict(),
        )

    def apply(self, resources: Sequence[Any], *, dry_run: bool = False, force: bool = False) -> List[ExecutionResult]:
        items = [r for r in resources if r.enabled]
        if not items:
            return []

        pool = ThreadPoolExecutor(max_workers=min(self.max_workers, len(items)), thread_name_prefix="statesmith-batch")
        started = time.perf_counter()
        try:
            futures = [pool.submit(self.executor.execute_item, r, dry_run=dry_run, force=force) for r in items]
            done, _ = wait(futures, timeout=self.timeout_seconds)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        results: List[ExecutionResult] = []
        critical: Optional[BaseException] = None
        for resource, fut in zip(items, futures):
            if fut not in done:
                timed_out = self._timeout_result(resource)
                if self.executor.abandon(resource.name, timed_out.error):
                    results.append(timed_out)
                    if self.ctx is not None:
                        self.ctx.add_warning(scope=resource.name, message=BATCH_TIMEOUT)
                    continue
                # settled just after the deadline: the result is on its way
            error = fut.exception()
            if error is not None:
                critical = critical or error
                continue
            results.append(fut.result())

        if self.ctx is not None:
            self.ctx.log(
                scope=SCOPE,
                level="INFO",
                message="batch finished",
                items=len(items),
                completed=len(done),
                elapsed=time.perf_counter() - started,
            )
        if critical is not None:
            raise critical
        return results
