# src/statesmith/__init__.py
"""
Statesmith — engine declarativo de validação e aplicação de configuração.

Uma Configuration é uma coleção ordenada de Resources; cada Resource sabe
testar, aplicar e reportar o próprio estado. O engine valida a Configuration
sem efeitos colaterais e depois a aplica item a item, de forma idempotente.

Arquitetura em alto nível:
    - core.resource     → contrato de Resource e registry de fábricas por tipo
    - core.catalog      → Configuration, parser e merge de fontes
    - core.bridge       → baselines + overrides do usuário, com cache
    - core.validation   → Validator (sequencial/paralelo, timeouts, análises)
    - core.engine       → Executor e BatchApplier
    - core.traceability → RunManifest e Event Log
    - resources         → Resources embutidos (JSON settings, comandos, memória)

Limites explícitos:
    - Não implementa procedimentos específicos de SO ou gerenciadores de pacote
    - Não executa nada automaticamente na importação
"""

__version__ = "0.1.0"
