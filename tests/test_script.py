import os
from datetime import datetime
from unittest.mock import MagicMock

import pytest

# ======= Execute with: pytest tests/test_script.py ========

from post_arch.script import (
    default_script_name,
    print_script,
    render_script,
    run_commands,
    run_script_file,
    write_script,
)
from post_arch.utils.exceptions import ShellCommandError

COMMANDS = ["yay -S vim", "echo done"]

# --- Fixtures ---

@pytest.fixture
def mock_executor():
    executor = MagicMock()
    executor.run.return_value = (0, "", "")
    return executor

# ----------------------------------------------------------------------
# --- Rendering / writing ---
# ----------------------------------------------------------------------

def test_render_script():
    assert render_script(COMMANDS) == "# Generated script\nyay -S vim\necho done\n"

def test_render_script_custom_header_and_no_commands():
    assert render_script([], header="#!/bin/bash") == "#!/bin/bash\n"

def test_default_script_name():
    now = datetime(2024, 3, 7, 9, 5, 2)
    assert default_script_name(now) == "generated-script_07_03_2024_090502.sh"

def test_write_script(tmp_path):
    target = tmp_path / "install.sh"
    path = write_script(COMMANDS, target)

    assert path == target
    assert target.read_text() == "# Generated script\nyay -S vim\necho done\n"
    assert os.access(target, os.X_OK)

def test_write_script_default_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write_script(COMMANDS)
    assert path.name.startswith("generated-script_")
    assert path.suffix == ".sh"
    assert (tmp_path / path).is_file()

def test_print_script():
    lines = []
    print_script(COMMANDS, echo=lines.append)
    assert lines == ["# Generated script\nyay -S vim\necho done"]

# ----------------------------------------------------------------------
# --- Execution ---
# ----------------------------------------------------------------------

def test_run_commands_in_order(mock_executor):
    assert run_commands(mock_executor, COMMANDS) == 2

    descriptions = [c.args[0] for c in mock_executor.run.call_args_list]
    commands = [c.args[1] for c in mock_executor.run.call_args_list]
    assert descriptions == ["[1/2] yay -S vim", "[2/2] echo done"]
    assert commands == COMMANDS
    for c in mock_executor.run.call_args_list:
        assert c.kwargs["shell"] is True
        assert c.kwargs["capture_output"] is False

def test_run_commands_stops_at_first_failure(mock_executor):
    mock_executor.run.side_effect = [(0, "", ""), ShellCommandError(command="false", exit_code=1)]
    with pytest.raises(ShellCommandError):
        run_commands(mock_executor, ["true", "false", "echo never"])
    assert mock_executor.run.call_count == 2

def test_run_commands_passes_dryrun(mock_executor):
    run_commands(mock_executor, ["echo a"], dryrun=True)
    assert mock_executor.run.call_args.kwargs["dryrun"] is True

def test_run_script_file_returns_exit_code(mock_executor, tmp_path):
    mock_executor.run.return_value = (3, "", "")
    script = tmp_path / "s.sh"

    assert run_script_file(mock_executor, script) == 3

    args, kwargs = mock_executor.run.call_args
    assert args[1] == ["bash", str(script)]
    assert kwargs["check"] is False
