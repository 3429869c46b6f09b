"""
starnotary/core/crypto.py

Wallet Cryptographic Layer

A wallet is an Ed25519 key pair. Its address is the public key:

    address = hex(raw 32-byte Ed25519 public key)   → 64-char lowercase hex

Key contracts:
    address                      : @property → 64-char lowercase hex  (NO parentheses)
    sign_message(message)        : str → base64url str, no padding
    verify_message(...)          : module function - verifies with ONLY an address
                                   This is the primitive OwnershipVerifier calls.

Messages are signed as their exact UTF-8 bytes. No prefixing, no hashing
before signing. The signer must sign the challenge string verbatim.
"""

import base64
from pathlib import Path

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
    load_pem_private_key,
)

ADDRESS_HEX_LENGTH = 64
_SIGNATURE_LENGTH  = 64


class WalletKey:
    """
    Ed25519 wallet key.

    Public surface:
        WalletKey.generate()                  → new random key
        WalletKey.from_file(path)             → load PEM private key
        WalletKey.from_private_bytes(seed)    → load from raw 32-byte seed

        key.address             (@property) → 64-char lowercase hex
        key.sign_message(msg)               → base64url str (no padding)
        key.save(path)                      → write PEM private key
    """

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key: Ed25519PrivateKey = private_key
        self._public_key:  Ed25519PublicKey  = private_key.public_key()
        self._address:     str = (
            self._public_key
            .public_bytes(Encoding.Raw, PublicFormat.Raw)
            .hex()
        )

    # ── Construction ──────────────────────────────────────────

    @classmethod
    def generate(cls) -> "WalletKey":
        """Generate a new random wallet key."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_file(cls, path: Path) -> "WalletKey":
        """
        Load a wallet key from a PEM file.
        Raises FileNotFoundError if path does not exist.
        Raises ValueError if the file is not a valid Ed25519 PEM key.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Key file not found: {path}")
        try:
            private_key = load_pem_private_key(path.read_bytes(), password=None)
        except (ValueError, TypeError) as exc:
            raise ValueError(
                f"Failed to load Ed25519 key from {path}: {exc}"
            ) from exc
        if not isinstance(private_key, Ed25519PrivateKey):
            raise ValueError(
                f"Key file {path} does not contain an Ed25519 private key"
            )
        return cls(private_key)

    @classmethod
    def from_private_bytes(cls, seed: bytes) -> "WalletKey":
        """
        Load a wallet key from a raw 32-byte seed.
        Raises ValueError if seed is not exactly 32 bytes.
        """
        if len(seed) != 32:
            raise ValueError(
                f"Ed25519 seed must be 32 bytes, got {len(seed)}"
            )
        return cls(Ed25519PrivateKey.from_private_bytes(seed))

    # ── Address ───────────────────────────────────────────────

    @property
    def address(self) -> str:
        """64-character lowercase hex wallet address. A @property."""
        return self._address

    # ── Signing ───────────────────────────────────────────────

    def sign_message(self, message: str) -> str:
        """
        Sign the UTF-8 bytes of message. Returns base64url, no '=' padding.
        Always 86 characters.
        """
        raw_sig = self._private_key.sign(message.encode("utf-8"))
        return base64.urlsafe_b64encode(raw_sig).rstrip(b"=").decode("ascii")

    # ── Persistence ───────────────────────────────────────────

    def save(self, path: Path) -> None:
        """
        Write the private key to disk as a PEM file.
        Creates parent directories if needed.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        pem = self._private_key.private_bytes(
            encoding=             Encoding.PEM,
            format=               PrivateFormat.PKCS8,
            encryption_algorithm= NoEncryption(),
        )
        path.write_bytes(pem)

    def __repr__(self) -> str:
        return f"WalletKey(address={self._address[:16]}...)"


def is_wallet_address(address: str) -> bool:
    """True if address is a 64-char lowercase hex string."""
    if not isinstance(address, str) or len(address) != ADDRESS_HEX_LENGTH:
        return False
    if address != address.lower():
        return False
    try:
        bytes.fromhex(address)
    except ValueError:
        return False
    return True


def verify_message(message: str, address: str, signature: str) -> bool:
    """
    THE signature verification primitive.

    Returns True if signature is an Ed25519 signature over the UTF-8 bytes
    of message by the key whose public key is address.

    Returns False for ANY failure (wrong key, bad encoding, wrong length,
    malformed address, corrupted signature). Never raises.
    """
    if not is_wallet_address(address):
        return False
    if not isinstance(message, str) or not isinstance(signature, str):
        return False
    try:
        pub = Ed25519PublicKey.from_public_bytes(bytes.fromhex(address))

        # Re-add base64url padding if stripped
        padding    = 4 - len(signature) % 4
        padded_sig = signature + "=" * (padding % 4)
        raw_sig    = base64.urlsafe_b64decode(padded_sig)

        if len(raw_sig) != _SIGNATURE_LENGTH:
            return False

        pub.verify(raw_sig, message.encode("utf-8"))
        return True

    except Exception:
        return False
