"""The interface for encrypting and decrypting files and data."""

from __future__ import annotations

import abc
import os


class NoEncryptionError(RuntimeError):
    """Raised when encryption is used but none is configured."""

    def __init__(self, message: str = "no encryption") -> None:
        super().__init__(message)


class Encryption(abc.ABC):
    """Encrypts and decrypts files and data."""

    @abc.abstractmethod
    def decrypt(self, ciphertext: bytes) -> bytes:
        """Return the plaintext of ciphertext."""

    @abc.abstractmethod
    def decrypt_to_file(self, plaintext_abs_path: str | os.PathLike, ciphertext: bytes) -> None:
        """Decrypt ciphertext and write the plaintext to plaintext_abs_path."""

    @abc.abstractmethod
    def encrypt(self, plaintext: bytes) -> bytes:
        """Return the ciphertext of plaintext."""

    @abc.abstractmethod
    def encrypt_file(self, plaintext_abs_path: str | os.PathLike) -> bytes:
        """Return the ciphertext of the file at plaintext_abs_path."""

    @abc.abstractmethod
    def encrypted_suffix(self) -> str:
        """Return the suffix given to encrypted files."""


class NoEncryption(Encryption):
    """An encryption that raises NoEncryptionError for every operation."""

    def decrypt(self, ciphertext: bytes) -> bytes:
        raise NoEncryptionError()

    def decrypt_to_file(self, plaintext_abs_path: str | os.PathLike, ciphertext: bytes) -> None:
        raise NoEncryptionError()

    def encrypt(self, plaintext: bytes) -> bytes:
        raise NoEncryptionError()

    def encrypt_file(self, plaintext_abs_path: str | os.PathLike) -> bytes:
        raise NoEncryptionError()

    def encrypted_suffix(self) -> str:
        return ""