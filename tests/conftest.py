# tests/conftest.py
"""
Fixtures compartilhados para testes do Statesmith.

Este módulo define fixtures reutilizáveis que fornecem:
- settings mínimas em YAML (defaults + local)
- contexto de execução controlado (RunContext)
- Resources fake, duck-typed e instrumentados
- fábrica de Configurations em memória

Decisões arquiteturais:
    - Resources fake não herdam de BaseResource (contrato por duck typing)
    - Imports do core são realizados de forma lazy para melhorar a
      clareza de erros durante falhas
    - Nenhuma fixture acessa rede, gerenciadores de pacote ou o perfil
      real do usuário

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica condicional complexa
"""

import time
from datetime import datetime, timezone

import pytest


# =====================================================
# Settings fixtures
# =====================================================

@pytest.fixture
def settings_defaults_yaml() -> str:
    """YAML de settings do projeto (base para o merge com overrides locais)."""
    return """\
validation:
  timeout_seconds: 30
  parallel: false
  throttle: 4
execution:
  dry_run: false
  include_types: [Package, JsonSettings]
bridge:
  cache_enabled: true
"""


@pytest.fixture
def settings_local_yaml() -> str:
    """YAML de overrides locais (apenas as chaves sobrescritas)."""
    return """\
validation:
  parallel: true
  throttle: 2
execution:
  include_types: [Command]
"""


# =====================================================
# RunContext / Resources / Configuration
# =====================================================

@pytest.fixture
def dummy_ctx():
    """
    RunContext determinístico para testes.

    `run_id` e `created_at` são fixos para garantir reprodutibilidade.
    """
    from statesmith.core.context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        settings={},
        meta={"source": "pytest"},
    )


@pytest.fixture
def FakeResource():
    """
    Fixture factory que fornece uma implementação duck-typed de Resource.

    A classe retornada registra quantas vezes cada operação foi chamada
    (`calls`) e permite simular:
        - estado já satisfeito (`satisfied`)
        - falha no apply (`apply_error`)
        - falha ou lentidão no test (`test_error`, `test_delay`)

    Após um apply bem-sucedido o recurso passa a estar satisfeito
    (idempotência observável).
    """
    from statesmith.core.resource import ApplyOutcome

    class _FakeResource:
        def __init__(
            self,
            name: str,
            type: str = "Package",
            *,
            satisfied: bool = False,
            enabled: bool = True,
            description: str = "",
            properties=None,
            apply_error: Exception = None,
            test_error: Exception = None,
            test_delay: float = 0.0,
            restart_required: bool = False,
        ):
            self.name = name
            self.type = type
            self.enabled = enabled
            self.description = description
            self.properties = dict(properties or {})
            self.satisfied = satisfied
            self.apply_error = apply_error
            self.test_error = test_error
            self.test_delay = test_delay
            self.restart_required = restart_required
            self.calls = {"test": 0, "apply": 0, "state": 0}

        def test(self) -> bool:
            self.calls["test"] += 1
            if self.test_delay:
                time.sleep(self.test_delay)
            if self.test_error is not None:
                raise self.test_error
            return self.satisfied

        def apply(self):
            self.calls["apply"] += 1
            if self.apply_error is not None:
                raise self.apply_error
            if self.satisfied:
                return ApplyOutcome.unchanged()
            self.satisfied = True
            return ApplyOutcome(
                changed=True,
                restart_required=self.restart_required,
                message=f"converged {self.name}",
            )

        def get_current_state(self):
            self.calls["state"] += 1
            return {"satisfied": self.satisfied}

    return _FakeResource


@pytest.fixture
def make_configuration():
    """Fábrica de Configurations: `make_configuration(*resources, name=..., version=...)`."""
    from statesmith.core.catalog import Configuration

    def _make(*resources, name: str = "test-config", version: str = "1.0"):
        cfg = Configuration(name=name, version=version)
        for r in resources:
            cfg.add(r)
        return cfg

    return _make


@pytest.fixture
def isolated_bridge():
    """
    Fábrica de ConfigurationBridge sem raízes de busca do usuário real.

    `isolated_bridge(baselines, roots=[...])` aceita caminhos (str/Path)
    como raízes explícitas.
    """
    from statesmith.core.bridge import ConfigurationBridge, SearchRoot

    def _make(baselines=None, *, roots=(), **kwargs):
        search_roots = [r if isinstance(r, SearchRoot) else SearchRoot(r, 30, "test") for r in roots]
        return ConfigurationBridge(baselines or {}, search_roots=search_roots, **kwargs)

    return _make
