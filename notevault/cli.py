"""
notevault - Command Line Interface

    notevault new <title> <content>    # Add an encrypted note
    notevault list                     # Titles that decrypt with this password
    notevault read <title>             # Show the first note with this title
    notevault delete <title>           # Delete every matching note that decrypts

The password is always asked for first, without echo.
Exit status: 0 on success (including "wrong password" outcomes),
1 when the vault file cannot be read or written.
"""

import argparse
import getpass
import logging
import sys
from typing import Callable, List, Optional

from . import __version__, config
from .errors import DecryptionFailed, NoteNotFound, StoreError
from .logger import configure_logging
from .vault import Vault

log = logging.getLogger(__name__)

PROMPT = "🔑 Enter password: "


def prompt_password() -> str:
    return getpass.getpass(PROMPT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notevault", description="Manage your encrypted notes")
    parser.add_argument(
        "--vault",
        default=None,
        metavar="PATH",
        help=f"vault file (default: $NOTEVAULT_FILE or {config.VAULT_FILE})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    p = sub.add_parser("new", help="Add a new encrypted note")
    p.add_argument("title", type=_title)
    p.add_argument("content", type=_text)

    sub.add_parser("list", help="List decryptable note titles")

    p = sub.add_parser("read", help="Read a note by its title")
    p.add_argument("title", type=_title)

    p = sub.add_parser("delete", help="Delete a note by its title (if it can be decrypted)")
    p.add_argument("title", type=_title)

    return parser


def _text(value: str) -> str:
    # Non-UTF-8 argv bytes arrive as lone surrogates and cannot be stored
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise argparse.ArgumentTypeError("must be valid UTF-8 text") from None
    return value


def _title(value: str) -> str:
    if not value:
        raise argparse.ArgumentTypeError("title must not be empty")
    return _text(value)


# =============================================================================
# Commands
# =============================================================================

def cmd_new(vault: Vault, args) -> None:
    vault.add_note(args.title, args.content)
    print("✅ Note added.")


def cmd_list(vault: Vault, args) -> None:
    print("🔐 Decryptable notes:")
    for title in vault.list_titles():
        print(f"📌 {title}")


def cmd_read(vault: Vault, args) -> None:
    try:
        content = vault.read_note(args.title)
    except NoteNotFound:
        print("❌ Note not found.")
    except DecryptionFailed:
        print("❌ Failed to decrypt. Wrong password?")
    else:
        print(f"🔓 Content: {content}")


def cmd_delete(vault: Vault, args) -> None:
    outcomes = vault.delete_note(args.title)
    for outcome in outcomes:
        if outcome.deleted:
            print(f"🗑️ Note '{outcome.title}' deleted.")
        else:
            print(f"❌ Cannot delete '{outcome.title}': Wrong password.")
    if not any(o.deleted for o in outcomes):
        print("❌ Note not found or password mismatch.")


COMMANDS = {
    "new": cmd_new,
    "list": cmd_list,
    "read": cmd_read,
    "delete": cmd_delete,
}


# =============================================================================
# Entry point
# =============================================================================

def main(argv: Optional[List[str]] = None,
         read_password: Optional[Callable[[], str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    read_password = read_password or prompt_password
    try:
        password = read_password()
    except (KeyboardInterrupt, EOFError):
        print("\nExiting...")
        return 1

    vault = Vault(args.vault or config.VAULT_FILE)
    try:
        vault.unlock(password)
        COMMANDS[args.command](vault, args)
    except StoreError as e:
        log.debug("Storage failure", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        vault.lock()
    return 0


if __name__ == "__main__":
    sys.exit(main())
