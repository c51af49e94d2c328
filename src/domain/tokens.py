"""
Token codec - Self-verifying signed credentials.

A token is ``base64(json({"payload": ..., "signature": ...}))`` where the
signature is the keyed digest of the payload's canonical serialization:
compact JSON, non-ASCII left unescaped, keys in insertion order. Tokens
built by ``build_payload`` always order keys email, name, role, prefix.
Lone surrogates are written as ``\\udxxx`` escapes, as JavaScript's
JSON.stringify does.
"""

import base64
import binascii
import json
import re
import secrets
from collections.abc import Mapping
from typing import Any

from .digest import keyed_digest
from .ports import Account

_SURROGATE = re.compile(r"[\ud800-\udfff]")


def build_payload(account: Account) -> dict[str, str]:
    """Claims carried by a token issued for an account."""
    return {
        "email": account.email,
        "name": account.name,
        "role": account.role,
        "prefix": account.prefix,
    }


def serialize_payload(payload: Mapping[str, Any]) -> str:
    """Canonical, byte-stable serialization fed to the digest."""
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return _SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def make_token(payload: Mapping[str, Any], secret: str, epoch: str) -> str:
    """
    Sign a payload and encode it as an opaque token.

    Args:
        payload: JSON-serializable claims
        secret: Signing secret
        epoch: Key epoch from current_epoch()

    Returns:
        Base64 token string
    """
    signature = keyed_digest(serialize_payload(payload), secret, epoch)
    envelope = {"payload": payload, "signature": signature}
    return base64.b64encode(serialize_payload(envelope).encode("utf-8")).decode("ascii")


def open_token(token: str, secret: str, epoch: str) -> dict[str, Any] | None:
    """
    Decode a token and verify its signature.

    Decode errors, malformed envelopes, payloads that cannot be digested
    and signature mismatches all return None; this function never raises
    for bad input.

    Returns:
        The payload if the signature matches, otherwise None
    """
    try:
        envelope = json.loads(base64.b64decode(token, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError):
        return None

    if not isinstance(envelope, dict):
        return None
    payload = envelope.get("payload")
    signature = envelope.get("signature")
    if not isinstance(payload, dict) or not isinstance(signature, str):
        return None

    try:
        expected = keyed_digest(serialize_payload(payload), secret, epoch)
    except (UnicodeError, ValueError, TypeError, RecursionError):
        return None
    if not secrets.compare_digest(expected.encode(), signature.encode("utf-8", "replace")):
        return None
    return payload
