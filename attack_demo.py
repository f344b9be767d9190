"""
notevault - Attack Demonstration

Run: python attack_demo.py

What it shows (and why attacks fail):
1) Wrong password cannot read, list or delete notes.
2) Ciphertext tampering is detected by AES-GCM.
3) Nonce tampering is detected by AES-GCM.
4) A corrupted vault file stops the program instead of being wiped.

And one thing that does NOT fail:
5) Moving a ciphertext/nonce pair under another title goes unnoticed,
   because the title is stored in plaintext and is not authenticated.
"""

import json
import os
import tempfile

from notevault import crypto
from notevault.errors import DecryptionFailed, StoreCorruptedError
from notevault.vault import Vault


LINE = "=" * 70


def section(title: str):
    print(f"\n{LINE}\n{title}\n{LINE}")


def rewrite(path: str, edit) -> None:
    """Edit the raw JSON records like an attacker with file access would."""
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    edit(records)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(records, f, indent=2)


def flip_first_bit(b64: str) -> str:
    raw = bytearray(crypto.decode(b64))
    raw[0] ^= 1
    return crypto.encode(bytes(raw))


def main():
    path = os.path.join(tempfile.mkdtemp(prefix="notevault-demo-"), "vault.json")
    password = "CorrectHorseBatteryStaple!"

    vault = Vault(path)
    vault.unlock(password)
    vault.add_note("bank", "PIN 4711")
    vault.add_note("wifi", "hunter2")

    # 1) Wrong password
    section("Attack 1: Wrong password")
    bad = Vault(path)
    bad.unlock("wrong_password")
    print(f"Titles visible with wrong password: {bad.list_titles()}")
    try:
        bad.read_note("bank")
        print("Unexpected: decryption succeeded with wrong password")
    except DecryptionFailed as e:
        print(f"Expected failure: wrong password cannot decrypt ({e})")
    outcomes = bad.delete_note("bank")
    print(f"Delete attempt removed {sum(o.deleted for o in outcomes)} notes")

    # 2) Ciphertext tampering
    section("Attack 2: Ciphertext tampering (AES-GCM)")
    rewrite(path, lambda r: r[0].update(content=flip_first_bit(r[0]["content"])))
    vault.unlock(password)
    try:
        vault.read_note("bank")
        print("Unexpected: tampered ciphertext still decrypted")
    except DecryptionFailed as e:
        print(f"Expected failure: AES-GCM detected tampering ({e})")

    # 3) Nonce tampering
    section("Attack 3: Nonce tampering (AES-GCM)")
    rewrite(path, lambda r: r[1].update(nonce=flip_first_bit(r[1]["nonce"])))
    vault.unlock(password)
    try:
        vault.read_note("wifi")
        print("Unexpected: tampered nonce still decrypted")
    except DecryptionFailed as e:
        print(f"Expected failure: AES-GCM detected tampering ({e})")

    # 4) Corrupted file
    section("Attack 4: Corrupted vault file")
    with open(path, "w", encoding="utf-8") as f:
        f.write("[{ garbage")
    try:
        vault.unlock(password)
        print("Unexpected: corrupted file accepted")
    except StoreCorruptedError as e:
        print(f"Expected failure: corrupted file refused ({e})")

    # 5) Title swap (known limit)
    section("Limit 5: Swapping ciphertexts between titles")
    os.unlink(path)
    vault.unlock(password)
    vault.add_note("harmless", "grocery list")
    vault.add_note("secret", "launch codes")

    def swap(records):
        records[0]["content"], records[1]["content"] = records[1]["content"], records[0]["content"]
        records[0]["nonce"], records[1]["nonce"] = records[1]["nonce"], records[0]["nonce"]

    rewrite(path, swap)
    vault.unlock(password)
    print(f"'harmless' now reads: {vault.read_note('harmless')!r}")
    print("Not detected: titles are outside the authenticated ciphertext.")

    vault.lock()
    os.unlink(path)
    print("\nDemo complete.")


if __name__ == "__main__":
    main()
