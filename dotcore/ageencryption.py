"""Encryption with the age command line tool."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field

from dotcore.encryption import Encryption

logger = logging.getLogger(__name__)


@dataclass
class AgeEncryption(Encryption):
    """Encrypts and decrypts by running an age command."""

    command: str = "age"
    args: list[str] = field(default_factory=list)
    identity: str | os.PathLike = ""
    identities: list[str | os.PathLike] = field(default_factory=list)
    passphrase: bool = False
    recipient: str = ""
    recipients: list[str] = field(default_factory=list)
    recipients_file: str | os.PathLike = ""
    recipients_files: list[str | os.PathLike] = field(default_factory=list)
    suffix: str = ".age"
    symmetric: bool = False

    def _run(self, argv: list[str], stdin: bytes | None) -> bytes:
        logger.debug("running %s", argv)
        result = subprocess.run(
            argv,
            input=stdin,
            stdin=subprocess.DEVNULL if stdin is None else None,
            stdout=subprocess.PIPE,
            check=True,
        )
        return result.stdout

    def decrypt(self, ciphertext: bytes) -> bytes:
        argv = [self.command, *self.decrypt_args(), *self.args]
        return self._run(argv, bytes(ciphertext))

    def decrypt_to_file(self, plaintext_abs_path: str | os.PathLike, ciphertext: bytes) -> None:
        argv = [
            self.command,
            *self.decrypt_args(),
            "--output",
            os.fspath(plaintext_abs_path),
            *self.args,
        ]
        self._run(argv, bytes(ciphertext))

    def encrypt(self, plaintext: bytes) -> bytes:
        argv = [self.command, *self.encrypt_args(), *self.args]
        return self._run(argv, bytes(plaintext))

    def encrypt_file(self, plaintext_abs_path: str | os.PathLike) -> bytes:
        argv = [self.command, *self.encrypt_args(), *self.args, os.fspath(plaintext_abs_path)]
        return self._run(argv, None)

    def encrypted_suffix(self) -> str:
        return self.suffix

    def decrypt_args(self) -> list[str]:
        """Return the command arguments for decryption."""
        args = ["--decrypt"]
        if not self.passphrase:
            args.extend(self.identity_args())
        return args

    def encrypt_args(self) -> list[str]:
        """Return the command arguments for encryption."""
        args = ["--armor", "--encrypt"]
        if self.passphrase:
            args.append("--passphrase")
        elif self.symmetric:
            args.extend(self.identity_args())
        else:
            if self.recipient:
                args += ["--recipient", self.recipient]
            for recipient in self.recipients:
                args += ["--recipient", recipient]
            if self.recipients_file:
                args += ["--recipients-file", os.fspath(self.recipients_file)]
            for recipients_file in self.recipients_files:
                args += ["--recipients-file", os.fspath(recipients_file)]
        return args

    def identity_args(self) -> list[str]:
        """Return the command arguments naming the identities."""
        args: list[str] = []
        if self.identity:
            args += ["--identity", os.fspath(self.identity)]
        for identity in self.identities:
            args += ["--identity", os.fspath(identity)]
        return args