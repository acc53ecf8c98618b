"""
Zypher Cryptographic Primitives
================================

The three building blocks of the envelope scheme:

- RSA-2048 OAEP key pairs (generation, PEM-style text export / import)
- AES-256-GCM per-file keys with authenticated encrypt / decrypt
- RSA-OAEP (SHA-256) wrapping of raw AES keys

Uses the ``cryptography`` library exclusively.

Key text format
---------------
::

    -----BEGIN PUBLIC KEY-----      (or PRIVATE KEY)
    <base64 of SPKI / PKCS8 DER on a single line>
    -----END PUBLIC KEY-----

Key roles are separate types: :class:`PublicKey` can only wrap,
:class:`PrivateKey` can only unwrap.  Likewise :class:`SymmetricKey` can
encrypt, decrypt and be exported, while :class:`DecryptionKey` can only
decrypt.
"""

from __future__ import annotations

import base64
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Union

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import (
    RSAPrivateKey,
    RSAPublicKey,
)
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

RSA_ALGORITHM: str = "RSA-OAEP"
RSA_MODULUS_BITS: int = 2048
RSA_PUBLIC_EXPONENT: int = 65537
RSA_HASH: str = "SHA-256"
HASH_SIZE: int = 32    # SHA-256 digest length, OAEP overhead is 2*HASH_SIZE + 2

AES_ALGORITHM: str = "AES-GCM"
KEY_BITS: int = 256
KEY_SIZE: int = 32     # AES-256 = 32 bytes
IV_SIZE: int = 12      # AES-GCM nonce
TAG_SIZE: int = 16     # GCM authentication tag

PUBLIC_LABEL: str = "PUBLIC KEY"
PRIVATE_LABEL: str = "PRIVATE KEY"

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ZypherError(Exception):
    """Base exception for all Zypher errors."""

    kind: str = "error"

    @property
    def detail(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "detail": self.detail}


class CryptoEnvironmentError(ZypherError):
    """The cryptographic provider cannot perform the operation."""

    kind = "environment"


class FormatError(ZypherError):
    """Malformed text or binary input."""

    kind = "format"


class CompatibilityError(ZypherError):
    """Artifact metadata names an unsupported algorithm or key length."""

    kind = "compatibility"


class KeySizeError(ZypherError):
    """Payload is too large to wrap under the given RSA modulus."""

    kind = "key_size"


class DecryptionError(ZypherError):
    """Common base for authentication and unwrap failures."""

    kind = "decryption"


class AuthenticationError(DecryptionError):
    """AES-GCM tag verification failed."""

    kind = "authentication"


class WrapUnwrapError(DecryptionError):
    """RSA-OAEP operation failed."""

    kind = "wrap_unwrap"


# ---------------------------------------------------------------------------
# Key handles
# ---------------------------------------------------------------------------


class _RSAKeyInfo:
    """Metadata shared by both RSA key roles."""

    algorithm = RSA_ALGORITHM
    public_exponent = RSA_PUBLIC_EXPONENT
    hash_name = RSA_HASH
    label = ""

    @property
    def modulus_length(self) -> int:
        return self.handle.key_size  # type: ignore[attr-defined]


@dataclass(frozen=True)
class PublicKey(_RSAKeyInfo):
    """RSA public key usable only for wrapping."""

    handle: RSAPublicKey = field(repr=False)
    label = PUBLIC_LABEL

    def export_der(self) -> bytes:
        return self.handle.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )


@dataclass(frozen=True)
class PrivateKey(_RSAKeyInfo):
    """RSA private key usable only for unwrapping."""

    handle: RSAPrivateKey = field(repr=False)
    label = PRIVATE_LABEL

    def export_der(self) -> bytes:
        return self.handle.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )


@dataclass(frozen=True)
class KeyPair:
    """A matched RSA public / private key pair."""

    public_key: PublicKey
    private_key: PrivateKey


@dataclass(frozen=True)
class DecryptionKey:
    """AES-256-GCM key rebuilt from unwrapped bytes.  Decrypt only."""

    material: bytes = field(repr=False)

    def __post_init__(self) -> None:
        _validate_key(self.material)


@dataclass(frozen=True)
class SymmetricKey(DecryptionKey):
    """Fresh AES-256-GCM key: encrypt, decrypt, and exportable for wrapping."""

    def export_raw(self) -> bytes:
        return bytes(self.material)


AnyKey = Union[PublicKey, PrivateKey]

# ---------------------------------------------------------------------------
# ZypherEngine
# ---------------------------------------------------------------------------


class ZypherEngine:
    """
    Stateless primitive operations.

    All public methods are **static**; the class is a namespace and holds
    no key material between calls.
    """

    # ------------------------------------------------------------------
    # Key-pair provider
    # ------------------------------------------------------------------

    @staticmethod
    def generate_key_pair() -> KeyPair:
        """Generate an RSA-2048 key pair bound to OAEP with SHA-256."""
        try:
            private_key = rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT,
                key_size=RSA_MODULUS_BITS,
            )
        except UnsupportedAlgorithm as exc:
            raise CryptoEnvironmentError(
                f"Cryptographic provider cannot generate RSA keys: {exc}"
            ) from exc
        logger.debug("Generated %d-bit RSA key pair", RSA_MODULUS_BITS)
        return KeyPair(
            public_key=PublicKey(private_key.public_key()),
            private_key=PrivateKey(private_key),
        )

    @staticmethod
    def export_key(key: AnyKey) -> str:
        """
        Serialize *key* to labelled text.

        Public keys are exported as SPKI, private keys as PKCS8; the label
        follows the key's type.
        """
        if not isinstance(key, (PublicKey, PrivateKey)):
            raise TypeError(f"Cannot export {type(key).__name__} as an RSA key.")
        b64 = base64.b64encode(key.export_der()).decode("ascii")
        return f"-----BEGIN {key.label}-----\n{b64}\n-----END {key.label}-----"

    @staticmethod
    def import_private_key(text: Union[str, bytes]) -> PrivateKey:
        """
        Load a private key exported by :meth:`export_key`.

        Raises
        ------
        FormatError
            Missing markers, invalid base64, or a DER payload that is not
            an RSA PKCS8 private key.
        """
        der = _decode_key_text(text, PRIVATE_LABEL)
        try:
            key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise FormatError("Private key is not a valid PKCS8 encoding.") from exc
        if not isinstance(key, RSAPrivateKey):
            raise FormatError("Private key is not an RSA key.")
        return PrivateKey(key)

    @staticmethod
    def import_public_key(text: Union[str, bytes]) -> PublicKey:
        """Load a public key exported by :meth:`export_key`."""
        der = _decode_key_text(text, PUBLIC_LABEL)
        try:
            key = serialization.load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise FormatError("Public key is not a valid SPKI encoding.") from exc
        if not isinstance(key, RSAPublicKey):
            raise FormatError("Public key is not an RSA key.")
        return PublicKey(key)

    # ------------------------------------------------------------------
    # Symmetric cipher (AES-256-GCM)
    # ------------------------------------------------------------------

    @staticmethod
    def generate_key() -> SymmetricKey:
        """Generate a fresh 256-bit AES-GCM key."""
        return SymmetricKey(os.urandom(KEY_SIZE))

    @staticmethod
    def generate_iv() -> bytes:
        """Generate a fresh 12-byte GCM nonce."""
        return os.urandom(IV_SIZE)

    @staticmethod
    def encrypt(plaintext: bytes, key: SymmetricKey, iv: bytes) -> bytes:
        """
        Encrypt *plaintext* without associated data.

        Returns ``ciphertext || tag(16)``.
        """
        if not isinstance(key, SymmetricKey):
            raise TypeError("Encryption requires a SymmetricKey.")
        _validate_iv(iv)
        return AESGCM(key.material).encrypt(iv, bytes(plaintext), None)

    @staticmethod
    def decrypt(ciphertext: bytes, key: DecryptionKey, iv: bytes) -> bytes:
        """
        Decrypt ``ciphertext || tag``.

        Raises
        ------
        AuthenticationError
            Tag mismatch: tampered data, wrong key, or wrong IV.
        """
        if not isinstance(key, DecryptionKey):
            raise TypeError("Decryption requires a DecryptionKey or SymmetricKey.")
        _validate_iv(iv)
        try:
            return AESGCM(key.material).decrypt(iv, bytes(ciphertext), None)
        except InvalidTag:
            raise AuthenticationError(
                "Authentication failed: data was corrupted or tampered with, "
                "or the key does not match."
            )

    # ------------------------------------------------------------------
    # Key wrapper (RSA-OAEP)
    # ------------------------------------------------------------------

    @staticmethod
    def max_wrap_size(public_key: PublicKey) -> int:
        """Largest payload OAEP-SHA-256 can wrap under *public_key*."""
        return public_key.modulus_length // 8 - 2 * HASH_SIZE - 2

    @staticmethod
    def wrap_key(raw_key: bytes, public_key: PublicKey) -> bytes:
        """Wrap raw symmetric key bytes under *public_key*."""
        if not isinstance(public_key, PublicKey):
            raise TypeError("Wrapping requires a PublicKey.")
        capacity = ZypherEngine.max_wrap_size(public_key)
        if len(raw_key) > capacity:
            raise KeySizeError(
                f"Cannot wrap {len(raw_key)} bytes: a {public_key.modulus_length}-bit "
                f"key holds at most {capacity} bytes."
            )
        try:
            return public_key.handle.encrypt(bytes(raw_key), _oaep())
        except ValueError as exc:
            raise KeySizeError(f"RSA-OAEP refused the payload: {exc}") from exc

    @staticmethod
    def unwrap_key(wrapped: bytes, private_key: PrivateKey) -> bytes:
        """
        Recover raw symmetric key bytes.

        Every failure is reported as the same :class:`WrapUnwrapError`.
        """
        if not isinstance(private_key, PrivateKey):
            raise TypeError("Unwrapping requires a PrivateKey.")
        try:
            raw = private_key.handle.decrypt(bytes(wrapped), _oaep())
        except ValueError:
            raw = None
        if raw is None or len(raw) != KEY_SIZE:
            raise WrapUnwrapError("Unable to unwrap the file key.")
        return raw


# ---------------------------------------------------------------------------
# Helpers (module-private)
# ---------------------------------------------------------------------------


def _oaep() -> asym_padding.OAEP:
    return asym_padding.OAEP(
        mgf=asym_padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def _validate_key(key: bytes) -> None:
    if not isinstance(key, (bytes, bytearray)):
        raise TypeError("Key material must be bytes.")
    if len(key) != KEY_SIZE:
        raise FormatError(f"Key must be exactly {KEY_SIZE} bytes (got {len(key)}).")


def _validate_iv(iv: bytes) -> None:
    if not isinstance(iv, (bytes, bytearray)) or len(iv) != IV_SIZE:
        raise FormatError(f"IV must be exactly {IV_SIZE} bytes.")


def _decode_key_text(text: Union[str, bytes], label: str) -> bytes:
    """Strip the BEGIN/END markers and whitespace, then base64-decode."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise FormatError("Key text must be UTF-8.") from exc
    begin = f"-----BEGIN {label}-----"
    end = f"-----END {label}-----"
    start = text.find(begin)
    stop = text.find(end)
    if start < 0 or stop < 0 or stop < start:
        raise FormatError(f"Missing '{begin}' / '{end}' markers.")
    body = re.sub(r"\s", "", text[start + len(begin) : stop])
    if not body:
        raise FormatError("Key text has an empty payload.")
    try:
        return base64.b64decode(body, validate=True)
    except ValueError as exc:
        raise FormatError("Key payload is not valid base64.") from exc


# ---------------------------------------------------------------------------
# Module-level convenience functions
# ---------------------------------------------------------------------------

_engine = ZypherEngine

generate_key_pair = _engine.generate_key_pair
export_key = _engine.export_key
import_private_key = _engine.import_private_key
import_public_key = _engine.import_public_key

generate_key = _engine.generate_key
generate_iv = _engine.generate_iv
encrypt = _engine.encrypt
decrypt = _engine.decrypt

max_wrap_size = _engine.max_wrap_size
wrap_key = _engine.wrap_key
unwrap_key = _engine.unwrap_key
