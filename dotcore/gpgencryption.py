"""Encryption with the gpg command line tool."""

from __future__ import annotations

import contextlib
import logging
import os
import subprocess
import tempfile
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from dotcore.encryption import Encryption

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def private_temp_dir() -> Iterator[Path]:
    """Create a private temporary directory, removed on exit."""
    with tempfile.TemporaryDirectory(prefix="dotcore-encryption") as temp_dir:
        if os.name != "nt":
            os.chmod(temp_dir, 0o700)
        yield Path(temp_dir)


@dataclass
class GPGEncryption(Encryption):
    """Encrypts and decrypts by running a gpg command."""

    command: str = "gpg"
    args: list[str] = field(default_factory=list)
    recipient: str = ""
    symmetric: bool = False
    suffix: str = ".asc"

    def _ciphertext_path(self, temp_dir: Path) -> Path:
        return temp_dir / ("ciphertext" + self.encrypted_suffix())

    def _run(self, args: list[str]) -> None:
        argv = [self.command, *args]
        logger.debug("running %s", argv)
        subprocess.run(argv, check=True)

    def decrypt(self, ciphertext: bytes) -> bytes:
        with private_temp_dir() as temp_dir:
            ciphertext_path = self._ciphertext_path(temp_dir)
            ciphertext_path.write_bytes(ciphertext)
            os.chmod(ciphertext_path, 0o600)
            plaintext_path = temp_dir / "plaintext"
            self._run(self.decrypt_args(plaintext_path, ciphertext_path))
            return plaintext_path.read_bytes()

    def decrypt_to_file(self, plaintext_abs_path: str | os.PathLike, ciphertext: bytes) -> None:
        with private_temp_dir() as temp_dir:
            ciphertext_path = self._ciphertext_path(temp_dir)
            ciphertext_path.write_bytes(ciphertext)
            os.chmod(ciphertext_path, 0o600)
            self._run(self.decrypt_args(plaintext_abs_path, ciphertext_path))

    def encrypt(self, plaintext: bytes) -> bytes:
        with private_temp_dir() as temp_dir:
            plaintext_path = temp_dir / "plaintext"
            plaintext_path.write_bytes(plaintext)
            os.chmod(plaintext_path, 0o600)
            ciphertext_path = self._ciphertext_path(temp_dir)
            self._run(self.encrypt_args(plaintext_path, ciphertext_path))
            return ciphertext_path.read_bytes()

    def encrypt_file(self, plaintext_abs_path: str | os.PathLike) -> bytes:
        with private_temp_dir() as temp_dir:
            ciphertext_path = self._ciphertext_path(temp_dir)
            self._run(self.encrypt_args(plaintext_abs_path, ciphertext_path))
            return ciphertext_path.read_bytes()

    def encrypted_suffix(self) -> str:
        return self.suffix

    def decrypt_args(
        self,
        plaintext_filename: str | os.PathLike,
        ciphertext_filename: str | os.PathLike,
    ) -> list[str]:
        """Return the command arguments for decryption."""
        return [
            "--output",
            os.fspath(plaintext_filename),
            *self.args,
            "--decrypt",
            os.fspath(ciphertext_filename),
        ]

    def encrypt_args(
        self,
        plaintext_filename: str | os.PathLike,
        ciphertext_filename: str | os.PathLike,
    ) -> list[str]:
        """Return the command arguments for encryption."""
        args = ["--armor", "--output", os.fspath(ciphertext_filename)]
        if self.symmetric:
            args.append("--symmetric")
        elif self.recipient:
            args += ["--recipient", self.recipient]
        args.extend(self.args)
        if not self.symmetric:
            args.append("--encrypt")
        args.append(os.fspath(plaintext_filename))
        return args