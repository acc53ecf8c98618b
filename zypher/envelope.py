"""
Zypher Envelope Codec
=====================

Ties the primitives in :mod:`zypher.algo` together into two artifacts
that can be stored or sent separately and recombined later.

Encrypted file artifact (binary)
--------------------------------
::

    IV          : 12 bytes
    Ciphertext  : variable (same length as the plaintext)
    GCM Tag     : 16 bytes

There is no header or length prefix; the 12-byte IV is implicit.

Encrypted key artifact (UTF-8 JSON)
-----------------------------------
::

    {"encryptedKey":"<base64 RSA-OAEP(AES key)>","algorithm":"RSA-OAEP",
     "aesAlgorithm":"AES-GCM","keyLength":256}
"""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from zypher import algo
from zypher.algo import (
    AES_ALGORITHM,
    IV_SIZE,
    KEY_BITS,
    RSA_ALGORITHM,
    CompatibilityError,
    DecryptionKey,
    FormatError,
    PrivateKey,
    PublicKey,
)

logger = logging.getLogger(__name__)

ENCRYPTED_SUFFIX = ".encrypted"
FALLBACK_NAME = "decrypted_file"
KEY_ARTIFACT_NAME = "encrypted_key.json"
PUBLIC_KEY_NAME = "public_key.pem"
PRIVATE_KEY_NAME = "private_key.pem"

PathLike = Union[str, Path]

# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EncryptedKey:
    """The wrapped file key plus the algorithm names used to produce it."""

    encrypted_key: bytes
    algorithm: str = RSA_ALGORITHM
    aes_algorithm: str = AES_ALGORITHM
    key_length: int = KEY_BITS

    def to_dict(self) -> dict:
        return {
            "encryptedKey": base64.b64encode(self.encrypted_key).decode("ascii"),
            "algorithm": self.algorithm,
            "aesAlgorithm": self.aes_algorithm,
            "keyLength": self.key_length,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "EncryptedKey":
        """
        Parse a key artifact.

        Raises
        ------
        FormatError
            Not a JSON object, or ``encryptedKey`` is missing / not base64.
        CompatibilityError
            Metadata other than RSA-OAEP / AES-GCM / 256.
        """
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise FormatError("Encrypted key file is not valid JSON.") from exc
        if not isinstance(data, dict):
            raise FormatError("Encrypted key file must contain a JSON object.")

        b64 = data.get("encryptedKey")
        if not isinstance(b64, str) or not b64:
            raise FormatError("Encrypted key file has no 'encryptedKey' field.")

        _check_metadata(data)

        try:
            wrapped = base64.b64decode(b64, validate=True)
        except ValueError as exc:
            raise FormatError("'encryptedKey' is not valid base64.") from exc
        return cls(encrypted_key=wrapped)


@dataclass(frozen=True)
class SealedFile:
    """Output of :func:`seal_file`."""

    encrypted_file: bytes
    encrypted_key: str


def _check_metadata(data: dict) -> None:
    expected = {
        "algorithm": RSA_ALGORITHM,
        "aesAlgorithm": AES_ALGORITHM,
        "keyLength": KEY_BITS,
    }
    for name, want in expected.items():
        got = data.get(name)
        # bool is an int subclass; True must not pass as a key length
        if isinstance(got, bool) or got != want:
            raise CompatibilityError(
                f"Unsupported {name} {got!r} (expected {want!r})."
            )


# ---------------------------------------------------------------------------
# Seal / open
# ---------------------------------------------------------------------------


def seal_file(file_bytes: bytes, public_key: PublicKey) -> SealedFile:
    """
    Encrypt *file_bytes* for the holder of the matching private key.

    A fresh IV and AES key are generated per call; neither is returned.
    """
    if not isinstance(public_key, PublicKey):
        raise TypeError("seal_file requires a PublicKey.")
    iv = algo.generate_iv()
    file_key = algo.generate_key()

    ciphertext = algo.encrypt(file_bytes, file_key, iv)
    wrapped = algo.wrap_key(file_key.export_raw(), public_key)
    record = EncryptedKey(encrypted_key=wrapped)

    logger.debug(
        "Sealed %d bytes (%s-%d, key wrapped with %s)",
        len(file_bytes), AES_ALGORITHM, KEY_BITS, RSA_ALGORITHM,
    )
    return SealedFile(encrypted_file=iv + ciphertext, encrypted_key=record.to_json())


def open_file(
    encrypted_file: bytes,
    encrypted_key: Union[str, bytes, EncryptedKey],
    private_key: PrivateKey,
) -> bytes:
    """
    Recover the plaintext of a sealed file.

    Raises
    ------
    FormatError, CompatibilityError
        Malformed artifacts; raised before any RSA operation.
    WrapUnwrapError
        The private key does not unwrap the file key.
    AuthenticationError
        The file artifact was modified or belongs to another key.
    """
    if not isinstance(private_key, PrivateKey):
        raise TypeError("open_file requires a PrivateKey.")
    if isinstance(encrypted_key, EncryptedKey):
        record = encrypted_key
        _check_metadata(record.to_dict())
    else:
        record = EncryptedKey.from_json(encrypted_key)

    if len(encrypted_file) < IV_SIZE:
        raise FormatError(
            f"Encrypted file is {len(encrypted_file)} bytes; "
            f"at least {IV_SIZE} are required for the IV."
        )

    raw_key = algo.unwrap_key(record.encrypted_key, private_key)
    file_key = DecryptionKey(raw_key)

    iv = bytes(encrypted_file[:IV_SIZE])
    ciphertext = bytes(encrypted_file[IV_SIZE:])
    plaintext = algo.decrypt(ciphertext, file_key, iv)
    logger.debug("Opened %d-byte artifact", len(encrypted_file))
    return plaintext


# ---------------------------------------------------------------------------
# File naming
# ---------------------------------------------------------------------------


def encrypted_file_name(name: str) -> str:
    """``report.pdf`` -> ``report.pdf.encrypted``"""
    return name + ENCRYPTED_SUFFIX


def original_file_name(name: str) -> str:
    """Undo :func:`encrypted_file_name`, else fall back to ``decrypted_file``."""
    parts = name.split(".")
    if len(parts) > 1 and parts[-1] == ENCRYPTED_SUFFIX[1:]:
        stem = ".".join(parts[:-1])
        if stem:
            return stem
    return FALLBACK_NAME


def key_artifact_name(name: str) -> str:
    """``report.pdf`` -> ``report.pdf.encrypted_key.json``"""
    return f"{name}.{KEY_ARTIFACT_NAME}"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def seal_path(
    input_path: PathLike,
    public_key: PublicKey,
    output_dir: Optional[PathLike] = None,
) -> Tuple[Path, Path]:
    """
    Seal a file on disk.

    Writes ``<name>.encrypted`` and ``<name>.encrypted_key.json`` into
    *output_dir* (default: next to the input) and returns both paths.
    Nothing is written if sealing fails, and existing files are never
    replaced.

    Raises
    ------
    FileExistsError
        Either output already exists.
    """
    input_path = Path(input_path)
    out_dir = Path(output_dir) if output_dir is not None else input_path.parent
    sealed = seal_file(input_path.read_bytes(), public_key)

    file_path = out_dir / encrypted_file_name(input_path.name)
    key_path = out_dir / key_artifact_name(input_path.name)
    if key_path.exists():
        raise FileExistsError(f"Refusing to overwrite {key_path}")
    out_dir.mkdir(parents=True, exist_ok=True)
    with open(file_path, "xb") as fh:
        fh.write(sealed.encrypted_file)
    try:
        with open(key_path, "x", encoding="utf-8") as fh:
            fh.write(sealed.encrypted_key)
    except FileExistsError:
        file_path.unlink()
        raise
    except BaseException:
        # a file artifact without its key is unrecoverable
        file_path.unlink()
        key_path.unlink(missing_ok=True)
        raise
    return file_path, key_path


def open_path(
    encrypted_path: PathLike,
    key_path: PathLike,
    private_key_path: PathLike,
    output_path: Optional[PathLike] = None,
) -> Path:
    """
    Open a sealed file on disk.

    The output defaults to the original name restored from
    *encrypted_path*, in the same directory.  Nothing is written if
    opening fails.

    Raises
    ------
    FileExistsError
        The output file already exists.
    """
    encrypted_path = Path(encrypted_path)
    private_key = algo.import_private_key(
        Path(private_key_path).read_text(encoding="utf-8-sig")
    )
    plaintext = open_file(
        encrypted_path.read_bytes(),
        Path(key_path).read_bytes(),
        private_key,
    )
    if output_path is None:
        output_path = encrypted_path.parent / original_file_name(encrypted_path.name)
    output_path = Path(output_path)
    with open(output_path, "xb") as fh:
        fh.write(plaintext)
    return output_path
