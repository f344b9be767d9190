"""
notevault - Command Line Workflows

Run with: python test_cli_workflows.py   (or: pytest)

Drives notevault.cli.main() end to end with a scripted password prompt
and checks what the user would see and what ends up in the vault file.
"""

import io
import json
import os
import tempfile
from contextlib import redirect_stderr, redirect_stdout
from typing import List, Tuple

from notevault import cli


def _vault_path() -> str:
    return os.path.join(tempfile.mkdtemp(prefix="notevault-cli-"), "vault.json")


def run_cli(path: str, password: str, *argv: str) -> Tuple[int, str, str]:
    """Run one invocation; returns (exit_code, stdout, stderr)."""
    asked: List[bool] = []

    def read_password() -> str:
        asked.append(True)
        return password

    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = cli.main(["--vault", path, *argv], read_password=read_password)
    assert asked == [True], "Password must be asked exactly once"
    return code, out.getvalue(), err.getvalue()


def stored_titles(path: str) -> List[str]:
    with open(path, encoding="utf-8") as f:
        return [n["title"] for n in json.load(f)]


def test_create_then_read():
    print("Testing create then read...")
    path = _vault_path()

    code, out, _ = run_cli(path, "abc123", "new", "shopping", "milk, eggs")
    assert code == 0
    assert "✅ Note added." in out

    code, out, _ = run_cli(path, "abc123", "read", "shopping")
    assert code == 0
    assert "🔓 Content: milk, eggs" in out
    print("  [OK] Note reads back")


def test_wrong_password_on_read():
    print("Testing wrong password on read...")
    path = _vault_path()
    run_cli(path, "hunter2", "new", "diary", "secret")

    code, out, _ = run_cli(path, "wrongpass", "read", "diary")
    assert code == 0, "Wrong password is not a program error"
    assert "❌ Failed to decrypt. Wrong password?" in out
    assert "secret" not in out

    code, out, _ = run_cli(path, "hunter2", "read", "nope")
    assert code == 0
    assert "❌ Note not found." in out
    print("  [OK] Wrong password reported")


def test_list_filters_by_password():
    print("Testing list filters by password...")
    path = _vault_path()

    # Prompt happens even before any note exists
    code, out, _ = run_cli(path, "A", "list")
    assert code == 0
    assert out.strip() == "🔐 Decryptable notes:"
    assert not os.path.exists(path), "list must not create the file"

    run_cli(path, "A", "new", "first", "1")
    run_cli(path, "A", "new", "second", "2")

    _, out, _ = run_cli(path, "B", "list")
    assert "first" not in out and "second" not in out

    _, out, _ = run_cli(path, "A", "list")
    assert "📌 first" in out and "📌 second" in out
    assert out.index("first") < out.index("second"), "Storage order kept"
    print("  [OK] List shows only decryptable notes")


def test_delete_requires_correct_password():
    print("Testing delete requires correct password...")
    path = _vault_path()
    run_cli(path, "pw1", "new", "temp", "x")

    code, out, _ = run_cli(path, "pw2", "delete", "temp")
    assert code == 0
    assert "❌ Cannot delete 'temp': Wrong password." in out
    assert "❌ Note not found or password mismatch." in out
    assert stored_titles(path) == ["temp"]

    code, out, _ = run_cli(path, "pw1", "delete", "temp")
    assert code == 0
    assert "🗑️ Note 'temp' deleted." in out
    assert "not found" not in out
    assert stored_titles(path) == []

    _, out, _ = run_cli(path, "pw1", "delete", "temp")
    assert "❌ Note not found or password mismatch." in out
    print("  [OK] Delete checks the password")


def test_delete_with_duplicate_titles():
    print("Testing delete with duplicate titles...")
    path = _vault_path()
    run_cli(path, "pw", "new", "dup", "one")
    run_cli(path, "pw", "new", "dup", "two")

    _, out, _ = run_cli(path, "pw", "delete", "dup")
    assert out.count("🗑️ Note 'dup' deleted.") == 2
    assert "dup" not in stored_titles(path)
    print("  [OK] Both duplicates deleted")


def test_corrupt_vault_is_fatal():
    print("Testing corrupt vault file...")
    path = _vault_path()
    with open(path, "w", encoding="utf-8") as f:
        f.write("{ this is not json")

    code, out, err = run_cli(path, "pw", "list")
    assert code == 1
    assert "ERROR:" in err
    assert "Decryptable" not in out

    code, _, _ = run_cli(path, "pw", "new", "t", "c")
    assert code == 1
    with open(path, encoding="utf-8") as f:
        assert f.read() == "{ this is not json", "Corrupt file must not be overwritten"
    print("  [OK] Corrupt vault stops the run")


def test_unparseable_numbers_and_nesting_are_fatal():
    print("Testing vault files json cannot load...")
    for text in ("[" + "1" * 5000 + "]", "[" * 100000 + "]" * 100000):
        path = _vault_path()
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

        code, out, err = run_cli(path, "pw", "list")
        assert code == 1
        assert "ERROR:" in err
        assert "Decryptable" not in out
    print("  [OK] Reported as corrupt, no traceback")


def test_non_utf8_arguments_rejected():
    print("Testing non-UTF-8 arguments...")
    path = _vault_path()
    bad = b"\xff".decode("utf-8", "surrogateescape")

    for argv in (["new", bad, "x"], ["new", "t", bad], ["read", bad], ["delete", bad]):
        asked = []
        err = io.StringIO()
        with redirect_stderr(err):
            try:
                cli.main(["--vault", path, *argv], read_password=lambda: asked.append(1) or "pw")
            except SystemExit as e:
                assert e.code == 2, "Usage error expected"
            else:
                raise AssertionError(f"{argv} should be rejected")
        assert "UTF-8" in err.getvalue()
        assert not asked, "Rejected before the password prompt"
    assert not os.path.exists(path)
    print("  [OK] Usage error instead of a crash")


def _reload_config(**env: str):
    """Reload notevault.config with NOTEVAULT_* variables replaced by env."""
    import importlib
    from notevault import config

    for name in ("NOTEVAULT_FILE", "NOTEVAULT_LOG_LEVEL", "NOTEVAULT_LOG_FILE"):
        os.environ.pop(name, None)
    os.environ.update(env)
    return importlib.reload(config)


def test_log_file_never_holds_secrets():
    print("Testing log file contents...")
    log_path = os.path.join(tempfile.mkdtemp(prefix="notevault-log-"), "notevault.log")
    path = _vault_path()
    try:
        _reload_config(NOTEVAULT_LOG_FILE=log_path)
        code, _, err = run_cli(path, "S3cretPassw0rd", "-v", "new", "bank", "PIN 4711")
        assert code == 0
        code, out, _ = run_cli(path, "S3cretPassw0rd", "-v", "read", "bank")
        assert code == 0 and "PIN 4711" in out
        run_cli(path, "S3cretPassw0rd", "-v", "delete", "bank")
    finally:
        _reload_config()
        cli.configure_logging()  # closes the file handler

    assert os.path.exists(log_path)
    with open(log_path, encoding="utf-8") as f:
        logged = f.read()
    assert "[DEBUG]" in logged and "Added note" in logged
    assert "S3cretPassw0rd" not in logged
    assert "PIN 4711" not in logged
    assert "DEBUG" in err, "-v also logs to stderr"
    print("  [OK] Debug log has no password or content")


def test_verbose_does_not_stick():
    import logging

    path = _vault_path()
    _, _, err = run_cli(path, "pw", "-v", "list")
    assert "DEBUG" in err
    assert logging.getLogger("notevault").level == logging.DEBUG

    _, _, err = run_cli(path, "pw", "list")
    assert logging.getLogger("notevault").level == logging.WARNING
    assert "DEBUG" not in err


def test_vault_file_from_environment():
    print("Testing NOTEVAULT_FILE...")
    path = _vault_path()
    try:
        config = _reload_config(NOTEVAULT_FILE=path)
        assert config.VAULT_FILE == path

        out = io.StringIO()
        with redirect_stdout(out):
            code = cli.main(["new", "t", "body"], read_password=lambda: "pw")
        assert code == 0
    finally:
        config = _reload_config()
    assert config.VAULT_FILE == "vault.json"
    assert stored_titles(path) == ["t"]
    print("  [OK] Default vault path comes from the environment")


def test_unwritable_vault_is_fatal():
    print("Testing unwritable vault location...")
    blocker = os.path.join(tempfile.mkdtemp(), "not-a-dir")
    with open(blocker, "w") as f:
        f.write("")
    path = os.path.join(blocker, "vault.json")

    code, _, err = run_cli(path, "pw", "new", "t", "c")
    assert code == 1
    assert "ERROR:" in err
    print("  [OK] Write failure stops the run")


def test_interrupted_prompt():
    path = _vault_path()

    def read_password() -> str:
        raise KeyboardInterrupt

    out = io.StringIO()
    with redirect_stdout(out):
        code = cli.main(["--vault", path, "list"], read_password=read_password)
    assert code == 1
    assert "Exiting..." in out.getvalue()


def test_argument_parsing():
    print("Testing argument parsing...")
    parser = cli.build_parser()
    args = parser.parse_args(["read", "x"])
    assert args.vault is None and args.command == "read" and args.title == "x"

    args = parser.parse_args(["--vault", "/tmp/other.json", "new", "t", "body"])
    assert args.vault == "/tmp/other.json"
    assert (args.title, args.content) == ("t", "body")
    print("  [OK] Arguments parsed")


def run_all_tests():
    print("=" * 70)
    print("notevault - CLI Workflow Tests")
    print("=" * 70)
    print()

    tests = [
        test_create_then_read,
        test_wrong_password_on_read,
        test_list_filters_by_password,
        test_delete_requires_correct_password,
        test_delete_with_duplicate_titles,
        test_corrupt_vault_is_fatal,
        test_unparseable_numbers_and_nesting_are_fatal,
        test_non_utf8_arguments_rejected,
        test_log_file_never_holds_secrets,
        test_verbose_does_not_stick,
        test_vault_file_from_environment,
        test_unwritable_vault_is_fatal,
        test_interrupted_prompt,
        test_argument_parsing,
    ]

    failed = []
    for test in tests:
        try:
            test()
            print()
        except Exception as e:
            print(f"  [FAIL] TEST FAILED: {e}")
            failed.append((test.__name__, e))
            print()

    print("=" * 70)
    if not failed:
        print("[OK] ALL TESTS PASSED!")
    else:
        print(f"[FAIL] {len(failed)} TESTS FAILED:")
        for name, error in failed:
            print(f"  - {name}: {error}")
    print("=" * 70)

    return len(failed) == 0


if __name__ == "__main__":
    import sys
    success = run_all_tests()
    sys.exit(0 if success else 1)
