# tests/reporting/test_report_markdown.py
"""
Testes dos relatórios Markdown.

Invariantes:
    - Seções obrigatórias sempre presentes
    - O relatório é derivado apenas do dict de resultado
    - Entrada vazia é erro explícito (ValueError)
"""

import pytest

try:
    from statesmith.core.engine import Executor
    from statesmith.core.exceptions import ApplyError
    from statesmith.core.settings import ValidationSettings
    from statesmith.core.validation import Validator
    from statesmith.report.report_md import (
        EXECUTION_SECTIONS,
        VALIDATION_SECTIONS,
        generate_execution_md,
        generate_validation_md,
    )
except Exception as e:  # noqa: BLE001
    Executor = None
    ApplyError = None
    ValidationSettings = None
    Validator = None
    EXECUTION_SECTIONS = None
    VALIDATION_SECTIONS = None
    generate_execution_md = None
    generate_validation_md = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing report module. Implement:\n"
            "- src/statesmith/report/report_md.py\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_validation_report_sections(FakeResource, make_configuration):
    _require_imports()
    cfg = make_configuration(FakeResource("git", satisfied=True), FakeResource("vlc"))
    result = Validator(ValidationSettings(check_compatibility=False)).validate(cfg)
    md = generate_validation_md(result.to_dict())

    for sec in VALIDATION_SECTIONS:
        assert sec in md
    assert "`test-config`" in md
    assert "| git | Package |" in md
    assert "not in desired state" in md


def test_execution_report_lists_failures_and_traceability(FakeResource, make_configuration):
    _require_imports()
    cfg = make_configuration(FakeResource("git"), FakeResource("vlc", apply_error=ApplyError("exit 2")))
    report = Executor().execute(cfg)
    manifest = {"run": {"run_id": "run-xyz"}, "inputs": {"configuration_hash": "abc"}, "events": [{}, {}]}
    md = generate_execution_md(report.to_dict(), manifest)

    for sec in EXECUTION_SECTIONS:
        assert sec in md
    assert "### vlc" in md
    assert "APPLY_ERROR" in md
    assert "2 total, 1 succeeded, 1 failed" in md
    assert "`run-xyz`" in md
    assert "## Traceability" in md


def test_execution_report_without_failures(FakeResource, make_configuration):
    _require_imports()
    report = Executor().execute(make_configuration(FakeResource("git")), dry_run=True)
    md = generate_execution_md(report.to_dict())
    assert "No failures." in md
    assert "`dry_run`" in md
    assert "## Traceability" not in md


def test_pipe_characters_are_escaped():
    _require_imports()
    md = generate_validation_md(
        {"configuration_name": "c", "item_results": [{"item_name": "a|b", "item_type": "T", "status": "Valid"}]}
    )
    assert "a\\|b" in md


@pytest.mark.parametrize("payload", [{}, None])
def test_empty_input_is_rejected(payload):
    _require_imports()
    with pytest.raises(ValueError):
        generate_validation_md(payload)
    with pytest.raises(ValueError):
        generate_execution_md(payload)
