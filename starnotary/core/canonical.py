"""
starnotary/core/canonical.py

Canonical JSON Encoding - RFC 8785 (JCS)

This is the ONLY canonicalization used by starnotary.
Block bodies are encoded with it and every block hash is computed over it.

RFC 8785: https://www.rfc-editor.org/rfc/rfc8785
"""

import hashlib
from typing import Any, Optional

try:
    import jcs as _jcs
except ImportError as exc:
    raise ImportError(
        "starnotary requires the 'jcs' package for RFC 8785 compliance.\n"
        "Install with: pip install jcs\n"
        f"Original error: {exc}"
    ) from exc


def canonicalize(obj: Any) -> bytes:
    """
    Encode a JSON value to RFC 8785 canonical JSON bytes.

    Output is deterministic regardless of key insertion order.
    All values must be JSON-primitive (str, int, float, bool, None, list, dict).

    Returns:
        UTF-8 encoded canonical JSON bytes.
    """
    return _jcs.canonicalize(obj)


def canonical_hash(obj: Any) -> str:
    """
    SHA-256 of the RFC 8785 canonical form.

    Returns:
        Lowercase hex-encoded SHA-256 digest (64 characters).
    """
    return hashlib.sha256(canonicalize(obj)).hexdigest()


def hash_link(
    height:              int,
    time:                int,
    previous_block_hash: Optional[str],
    body:                str,
) -> str:
    """
    THE block hash function.

    Hashes the linking fields and the body, never the hash field itself:

        hash = SHA-256(JCS({body, height, previousBlockHash, time}))

    A genesis block hashes previousBlockHash as JSON null.
    """
    return canonical_hash({
        "body":              body,
        "height":            height,
        "previousBlockHash": previous_block_hash,
        "time":              time,
    })
