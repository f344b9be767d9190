"""
notevault - Encrypted Notes Vault

A small command-line vault that keeps short text notes in one JSON file,
each note's content encrypted under a key derived from your password.

Key Features:
- AES-256-GCM authenticated encryption, fresh random nonce per note
- Wrong password or tampered data is detected, never decrypted to garbage
- Notes that don't decrypt with the current password are simply hidden

Components:
- crypto.py: Key derivation, encryption, base64 text encoding
- store.py: JSON file load/save of the whole note collection
- vault.py: Create / list / read / delete logic
- cli.py: Command-line interface (uses built-in argparse)

Usage:
    python -m notevault new shopping "milk, eggs"
    python -m notevault list
    python -m notevault read shopping
    python -m notevault delete shopping
"""

__version__ = "0.1.0"
