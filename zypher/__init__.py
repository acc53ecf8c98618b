"""Zypher: hybrid RSA-OAEP + AES-256-GCM file encryption."""

from zypher.algo import (
    AuthenticationError,
    CompatibilityError,
    CryptoEnvironmentError,
    DecryptionError,
    DecryptionKey,
    FormatError,
    KeyPair,
    KeySizeError,
    PrivateKey,
    PublicKey,
    SymmetricKey,
    WrapUnwrapError,
    ZypherError,
    export_key,
    generate_key_pair,
    import_private_key,
    import_public_key,
)
from zypher.envelope import (
    EncryptedKey,
    SealedFile,
    encrypted_file_name,
    key_artifact_name,
    open_file,
    open_path,
    original_file_name,
    seal_file,
    seal_path,
)

__version__ = "1.0.0"
