# tests/resources/test_command_resource.py
"""
Testes do CommandResource.

Os comandos usam o próprio interpretador (`sys.executable`) para que os
testes sejam portáveis e não dependam de utilitários do SO.

Invariantes:
    - Exit code 0 no test_command → satisfeito
    - Binário ausente no test → False (nunca levanta)
    - Exit code não zero no apply → ApplyError com returncode nos details
"""

import sys

import pytest

try:
    from statesmith.core.exceptions import ApplyError
    from statesmith.resources import CommandResource
except Exception as e:  # noqa: BLE001
    ApplyError = None
    CommandResource = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing command resource. Implement:\n"
            "- src/statesmith/resources/command.py (CommandResource)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def _py(code: str):
    return [sys.executable, "-c", code]


def _resource(**props):
    return CommandResource(name="cmd", type="Command", properties=props)


def test_exit_code_drives_test():
    _require_imports()
    assert _resource(test_command=_py("raise SystemExit(0)"), apply_command=_py("")).test() is True
    assert _resource(test_command=_py("raise SystemExit(3)"), apply_command=_py("")).test() is False


def test_missing_binary_is_not_satisfied():
    _require_imports()
    r = _resource(test_command=["statesmith-no-such-binary-xyz"], apply_command=_py(""))
    assert r.test() is False


def test_apply_success_uses_last_stdout_line():
    _require_imports()
    r = _resource(
        test_command=_py("raise SystemExit(1)"),
        apply_command=_py("print('step 1'); print('installed')"),
        restart_required=True,
    )
    out = r.apply()
    assert out.changed is True
    assert out.restart_required is True
    assert out.message == "installed"


def test_apply_failure_raises_apply_error():
    _require_imports()
    r = _resource(
        test_command=_py("raise SystemExit(1)"),
        apply_command=_py("import sys; sys.stderr.write('boom'); raise SystemExit(7)"),
    )
    with pytest.raises(ApplyError) as exc:
        r.apply()
    assert exc.value.details["returncode"] == 7
    assert "boom" in exc.value.details["stderr"]


def test_state_command_output_in_snapshot():
    _require_imports()
    r = _resource(
        test_command=_py("raise SystemExit(0)"),
        apply_command=_py(""),
        state_command=_py("print('v2.44')"),
    )
    assert r.get_current_state() == {"satisfied": True, "output": "v2.44"}
