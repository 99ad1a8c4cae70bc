"""AES-256-CBC encryption of whole files.

An encrypted file holds base64(iv + base64(ciphertext)): a random 16-byte
IV followed by the base64 text of the PKCS7-padded ciphertext. There is no
authentication tag, so decrypting with the wrong key is only detected when
the padding comes out invalid.
"""

from __future__ import annotations

import base64
import logging
import os
from pathlib import Path

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from fskit.errors import FsError, MalformedDocumentError
from fskit.filesystem import RealFileSystem
from fskit.protocols import FileSystem
from fskit.types import OpResult

logger = logging.getLogger(__name__)

KEY_SIZE = 32
IV_SIZE = 16


def normalize_key(key: str | bytes) -> bytes:
    """Fit a key to 32 bytes, padding with NUL bytes or truncating.

    Args:
        key: Text (UTF-8 encoded) or raw bytes.

    Returns:
        A 32-byte AES-256 key.

    Raises:
        ValueError: If the key is empty.
    """
    raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    if not raw:
        raise ValueError("encryption key must not be empty")
    return raw[:KEY_SIZE].ljust(KEY_SIZE, b"\0")


class FileEncryption:
    """Encrypt and decrypt files with a shared secret key."""

    def __init__(self, key: str | bytes, filesystem: FileSystem | None = None) -> None:
        """Initialize with a key.

        Args:
            key: Secret key; see normalize_key for how it is sized.
            filesystem: Leaf filesystem (RealFileSystem if not provided).
        """
        self._key = normalize_key(key)
        self.fs = filesystem or RealFileSystem()

    def encrypt(self, data: bytes) -> bytes:
        """Encrypt bytes into the base64 container format."""
        iv = os.urandom(IV_SIZE)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(data) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return base64.b64encode(iv + base64.b64encode(ciphertext))

    def decrypt(self, token: bytes) -> bytes:
        """Decrypt bytes produced by encrypt.

        Raises:
            MalformedDocumentError: If the token is not valid base64, is too
                short, or does not decrypt to correctly padded data.
        """
        try:
            raw = base64.b64decode(token.strip(), validate=True)
            iv, body = raw[:IV_SIZE], raw[IV_SIZE:]
            if len(iv) != IV_SIZE or not body:
                raise ValueError("token is too short")
            ciphertext = base64.b64decode(body, validate=True)
            decryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            raise MalformedDocumentError(f"Cannot decrypt data: {e}") from e

    def encrypt_file(self, source: Path, destination: Path) -> OpResult[int]:
        """Encrypt source and write the result to destination.

        Returns:
            OpResult for the destination with the number of bytes written.
        """
        return self._transform(Path(source), Path(destination), self.encrypt)

    def decrypt_file(self, source: Path, destination: Path) -> OpResult[int]:
        """Decrypt source and write the plaintext to destination.

        Nothing is written when decryption fails.
        """
        return self._transform(Path(source), Path(destination), self.decrypt)

    def _transform(self, source: Path, destination: Path, codec) -> OpResult[int]:
        try:
            content = self.fs.read_bytes(source)
        except FsError as e:
            logger.debug("Cannot read %s: %s", source, e)
            return OpResult.from_error(source, e)
        try:
            output = codec(content)
        except MalformedDocumentError as e:
            logger.debug("Cannot decrypt %s: %s", source, e)
            return OpResult.from_error(source, e)
        try:
            return OpResult.ok(destination, self.fs.write_bytes(destination, output))
        except FsError as e:
            return OpResult.from_error(destination, e)
