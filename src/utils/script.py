"""Script templates used to size the channel funding transaction.

Only the byte length of these scripts affects the transaction weight, so the
keys and hashes inside them are fixed placeholders instead of real key
material.

Includes the following:
    - PLACEHOLDER_XONLY_PUBKEY (constant): the x-only key used by every taproot
        placeholder script.
    - PLACEHOLDER_PUBKEY_HASH (constant): the key hash of the P2WPKH
        placeholder script.
    - FUNDING_SCRIPT (constant): the witness script committed by the funding
        output.
    - p2tr_script, p2wpkh_script, p2wsh_script (functions): scriptPubKey
        builders.
"""
from __future__ import annotations

import hashlib

OP_0: int = 0x00
OP_1: int = 0x51

#: x coordinate of the secp256k1 generator point, a well known valid x-only key
PLACEHOLDER_XONLY_PUBKEY: bytes = bytes.fromhex(
    "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
)

PLACEHOLDER_PUBKEY_HASH: bytes = bytes(20)

#: stand-in for the 2-of-2 multisig script of the channel (68 bytes long)
FUNDING_SCRIPT: bytes = bytes(68)


def _witness_program(version: int, program: bytes) -> bytes:
    return bytes([version, len(program)]) + program


def p2tr_script(xonly_pubkey: bytes = PLACEHOLDER_XONLY_PUBKEY) -> bytes:
    """Build a pay to taproot scriptPubKey.

    Args:
        xonly_pubkey: the 32 byte output key.

    Returns:
        OP_1 <32-byte-key>
    """
    if len(xonly_pubkey) != 32:
        raise ValueError("x-only public keys must be 32 bytes long")
    return _witness_program(OP_1, xonly_pubkey)


def p2wpkh_script(pubkey_hash: bytes = PLACEHOLDER_PUBKEY_HASH) -> bytes:
    """Build a pay to witness public key hash scriptPubKey.

    Args:
        pubkey_hash: the 20 byte hash of the public key.

    Returns:
        OP_0 <20-byte-pubkeyhash>
    """
    if len(pubkey_hash) != 20:
        raise ValueError("public key hashes must be 20 bytes long")
    return _witness_program(OP_0, pubkey_hash)


def p2wsh_script(witness_script: bytes) -> bytes:
    """Build a pay to witness script hash scriptPubKey.

    Args:
        witness_script: the script whose SHA256 is committed to.

    Returns:
        OP_0 <32-byte-scripthash>
    """
    return _witness_program(OP_0, hashlib.sha256(witness_script).digest())

