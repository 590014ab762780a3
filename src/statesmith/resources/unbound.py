# src/statesmith/resources/unbound.py
"""
Resource declarado sem implementação registrada para o seu tipo.

Permite que declarações com tipos externos (ex.: Package, FeatureToggle)
sejam parseadas, validadas estruturalmente e estimadas, mesmo quando o
colaborador que conversa com o SO não foi registrado no `ResourceRegistry`.

Comportamento:
    - test() → False (estado desconhecido é tratado como não satisfeito)
    - apply() → ApplyError explícito, capturado pelo Executor por item
    - get_current_state() → {"bound": False}
"""

from __future__ import annotations

from statesmith.core.exceptions import ApplyError
from statesmith.core.resource import ApplyOutcome, BaseResource, StateSnapshot


class UnboundResource(BaseResource):

    def test(self) -> bool:
        return False

    def apply(self) -> ApplyOutcome:
        raise ApplyError(
            f"no implementation bound for resource type '{self.type}'",
            details={"item": self.name, "type": self.type},
            hint="Registre uma fábrica para este tipo no ResourceRegistry antes de aplicar.",
        )

    def get_current_state(self) -> StateSnapshot:
        return {"bound": False, "type": self.type}
