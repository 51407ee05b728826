import os
import subprocess
import sys

import pytest

from dotcore.ageencryption import AgeEncryption

FAKE_AGE = """\
import sys

KEY = 0x5A
args = sys.argv[1:]
value_options = {"--output", "--identity", "--recipient", "--recipients-file"}


def xor(data):
    return bytes(b ^ KEY for b in data)


output = args[args.index("--output") + 1] if "--output" in args else None
if "--decrypt" in args:
    if "--identity" not in args:
        sys.exit(2)
    data = xor(sys.stdin.buffer.read())
elif "--encrypt" in args:
    if "--armor" not in args or "--recipient" not in args:
        sys.exit(2)
    last = args[-1]
    if len(args) >= 2 and args[-2] not in value_options and not last.startswith("-"):
        with open(last, "rb") as f:
            data = xor(f.read())
    else:
        data = xor(sys.stdin.buffer.read())
else:
    sys.exit(2)
if output:
    with open(output, "wb") as f:
        f.write(data)
else:
    sys.stdout.buffer.write(data)
"""

PLAINTEXT = b"plaintext\n"


@pytest.fixture
def fake_age(tmp_path):
    script = tmp_path / "fake_age"
    script.write_text(f"#!{sys.executable}\n" + FAKE_AGE)
    os.chmod(script, 0o755)
    return str(script)


@pytest.fixture
def age(fake_age, tmp_path):
    return AgeEncryption(
        command=fake_age,
        identity=str(tmp_path / "key.txt"),
        recipient="age1recipient",
    )


def test_encrypt_decrypt(age):
    ciphertext = age.encrypt(PLAINTEXT)
    assert ciphertext
    assert ciphertext != PLAINTEXT
    assert age.decrypt(ciphertext) == PLAINTEXT


def test_decrypt_to_file(age, tmp_path):
    ciphertext = age.encrypt(PLAINTEXT)
    target = tmp_path / "plaintext"
    age.decrypt_to_file(str(target), ciphertext)
    assert target.read_bytes() == PLAINTEXT


def test_encrypt_file(age, tmp_path):
    source = tmp_path / "plaintext"
    source.write_bytes(PLAINTEXT)
    ciphertext = age.encrypt_file(str(source))
    assert ciphertext != PLAINTEXT
    assert age.decrypt(ciphertext) == PLAINTEXT


def test_command_failure_raises(fake_age):
    age = AgeEncryption(command=fake_age, recipient="age1recipient")
    with pytest.raises(subprocess.CalledProcessError):
        age.decrypt(b"ciphertext")


def test_encrypted_suffix():
    assert AgeEncryption(suffix=".age").encrypted_suffix() == ".age"


def test_recipient_args():
    age = AgeEncryption(
        identity="/keys/a.txt",
        identities=["/keys/b.txt"],
        recipient="age1one",
        recipients=["age1two"],
        recipients_file="/keys/r1.txt",
        recipients_files=["/keys/r2.txt"],
    )
    assert age.encrypt_args() == [
        "--armor",
        "--encrypt",
        "--recipient",
        "age1one",
        "--recipient",
        "age1two",
        "--recipients-file",
        "/keys/r1.txt",
        "--recipients-file",
        "/keys/r2.txt",
    ]
    assert age.decrypt_args() == [
        "--decrypt",
        "--identity",
        "/keys/a.txt",
        "--identity",
        "/keys/b.txt",
    ]
    assert age.identity_args() == ["--identity", "/keys/a.txt", "--identity", "/keys/b.txt"]


def test_passphrase_args():
    age = AgeEncryption(passphrase=True, identity="/keys/a.txt", recipient="age1one")
    assert age.encrypt_args() == ["--armor", "--encrypt", "--passphrase"]
    assert age.decrypt_args() == ["--decrypt"]


def test_symmetric_args():
    age = AgeEncryption(symmetric=True, identity="/keys/a.txt", recipient="age1one")
    assert age.encrypt_args() == ["--armor", "--encrypt", "--identity", "/keys/a.txt"]


def test_no_identity_args():
    assert AgeEncryption().identity_args() == []
    assert AgeEncryption().decrypt_args() == ["--decrypt"]