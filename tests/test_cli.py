import os

import pyperclip
import pytest
from click.testing import CliRunner

from securevault.cli import cli

MASTER = "Correct-Horse-9-Battery"


@pytest.fixture
def run(config):
    runner = CliRunner()

    def _run(args, input=None):
        return runner.invoke(cli, args, input=input, obj=config)
    return _run


@pytest.fixture
def vault(run):
    result = run(["init"], input=f"{MASTER}\n{MASTER}\n")
    assert result.exit_code == 0, result.output
    return run


def add_github(run):
    result = run(
        ["add", "-w", "github.com", "-u", "alice", "-n", "work laptop"],
        input=f"{MASTER}\ngh-secret\ngh-secret\n",
    )
    assert result.exit_code == 0, result.output
    return result


def test_init_creates_vault(vault, config):
    assert os.path.exists(config.data_file)


def test_init_refuses_existing_vault(vault):
    result = vault(["init"], input=f"{MASTER}\n{MASTER}\n")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_init_weak_password_can_be_declined(run, config):
    result = run(["init"], input="abc\nabc\nn\n")
    assert result.exit_code == 0
    assert "Vault not created" in result.output
    assert not os.path.exists(config.data_file)


def test_commands_need_a_vault(run):
    result = run(["list"])
    assert result.exit_code == 1
    assert "No vault found" in result.output


def test_add_and_get(vault):
    add_github(vault)

    masked = vault(["get", "GitHub.com"], input=f"{MASTER}\n")
    assert masked.exit_code == 0
    assert "alice" in masked.output
    assert "gh-secret" not in masked.output
    assert "*********" in masked.output

    shown = vault(["get", "github.com", "--show"], input=f"{MASTER}\n")
    assert "gh-secret" in shown.output
    assert "work laptop" in shown.output


def test_add_generated_password(vault):
    result = vault(["add", "-w", "example.org", "-u", "bob", "-g", "-l", "24"], input=f"{MASTER}\n")
    assert result.exit_code == 0, result.output
    assert "Generated password" in result.output


def test_unlock_attempts_are_limited(vault):
    result = vault(["list"], input="wrong\nstill wrong\nnope\n")
    assert result.exit_code == 1
    assert "Attempt 3 of 3" in result.output
    assert "Maximum attempts exceeded" in result.output


def test_second_attempt_can_succeed(vault):
    result = vault(["list"], input=f"wrong\n{MASTER}\n")
    assert result.exit_code == 0
    assert "Attempt 1 of 3" in result.output


def test_get_missing(vault):
    result = vault(["get", "nowhere"], input=f"{MASTER}\n")
    assert result.exit_code == 1
    assert "No credential found" in result.output


def test_list_and_search(vault):
    add_github(vault)

    listing = vault(["list"], input=f"{MASTER}\n")
    assert "github.com" in listing.output
    assert "Total: 1" in listing.output

    found = vault(["search", "LAPTOP"], input=f"{MASTER}\n")
    assert "github.com" in found.output

    missing = vault(["search", "gitlab"], input=f"{MASTER}\n")
    assert "No credentials match" in missing.output


def test_update(vault):
    add_github(vault)

    result = vault(["update", "github.com", "-u", "bob", "-p"], input=f"{MASTER}\nnew-secret\nnew-secret\n")
    assert result.exit_code == 0, result.output

    shown = vault(["get", "github.com", "--show"], input=f"{MASTER}\n")
    assert "bob" in shown.output
    assert "new-secret" in shown.output


def test_update_without_changes(vault):
    add_github(vault)
    result = vault(["update", "github.com"], input=f"{MASTER}\n")
    assert "Nothing to update" in result.output


def test_delete(vault):
    add_github(vault)

    result = vault(["delete", "github.com", "-f"], input=f"{MASTER}\n")
    assert result.exit_code == 0

    listing = vault(["list"], input=f"{MASTER}\n")
    assert "No credentials stored yet" in listing.output


def test_change_master(vault):
    add_github(vault)

    result = vault(["change-master"], input=f"{MASTER}\nN3w-Master-Pass\nN3w-Master-Pass\n")
    assert result.exit_code == 0, result.output

    shown = vault(["get", "github.com", "--show"], input="N3w-Master-Pass\n")
    assert "gh-secret" in shown.output

    old = vault(["list"], input=f"{MASTER}\n{MASTER}\n{MASTER}\n")
    assert old.exit_code == 1


def test_export(vault, tmp_path):
    add_github(vault)
    out = tmp_path / "report.txt"

    result = vault(["export", str(out), "--include-passwords"], input=f"{MASTER}\ny\n")
    assert result.exit_code == 0, result.output
    assert "Password: gh-secret" in out.read_text()


def test_backups(vault):
    add_github(vault)
    result = vault(["backups"])
    assert "1 backup(s)" in result.output


def test_cp_copies_password(vault, monkeypatch):
    copied = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)
    add_github(vault)

    result = vault(["cp", "github.com", "-t", "0"], input=f"{MASTER}\n")
    assert result.exit_code == 0, result.output
    assert copied == ["gh-secret"]
    assert "gh-secret" not in result.output


def test_generate(run):
    result = run(["generate", "--length", "20"])
    assert result.exit_code == 0
    assert len(result.output.strip()) == 20


def test_generate_many(run):
    result = run(["generate", "-c", "3", "--exclude-similar"])
    lines = result.output.strip().splitlines()
    assert [line.split(". ")[0] for line in lines] == ["1", "2", "3"]


def test_generate_memorable(run):
    result = run(["generate", "-m", "-l", "10"])
    assert len(result.output.strip()) == 10


def test_generate_impossible_config(run):
    result = run(["generate", "-l", "4", "--min-digits", "5"])
    assert result.exit_code == 1
    assert "too short" in result.output


def test_strength(run):
    result = run(["strength", "aB3$"])
    assert result.exit_code == 0
    assert "Level: Weak" in result.output
    assert "48%" in result.output
