# src/statesmith/core/__init__.py
"""
Core do Statesmith.

Este pacote reúne as responsabilidades essenciais do engine, independentes
de CLI ou de Resources concretos:
    - settings     → carga, merge, validação e hashing das settings do engine
    - resource     → contrato de Resource, tipos e registry
    - catalog      → Configuration, parser, merge de fontes e presets
    - bridge       → resolução baseline + override com cache
    - validation   → Validator e análises auxiliares
    - engine       → Executor e BatchApplier
    - traceability → RunManifest e Event Log
    - context      → RunContext (eventos estruturados e warnings)
    - exceptions / errors → taxonomia de exceções e payloads serializáveis

Princípios fundamentais:
    - Nenhuma decisão silenciosa: falhas por item viram resultados explícitos
    - Nenhum estado global: Bridge, Validator e Executor são construídos e injetados
"""
