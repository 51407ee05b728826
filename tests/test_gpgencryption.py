import os
import stat
import subprocess
import sys

import pytest

from dotcore.gpgencryption import GPGEncryption, private_temp_dir

FAKE_GPG = """\
import sys

KEY = 0x3C
args = sys.argv[1:]
if "--output" not in args or "--no-tty" not in args:
    sys.exit(2)
output = args[args.index("--output") + 1]
with open(args[-1], "rb") as f:
    data = bytes(b ^ KEY for b in f.read())
with open(output, "wb") as f:
    f.write(data)
"""

PLAINTEXT = b"plaintext\n"


@pytest.fixture
def fake_gpg(tmp_path):
    script = tmp_path / "fake_gpg"
    script.write_text(f"#!{sys.executable}\n" + FAKE_GPG)
    os.chmod(script, 0o755)
    return str(script)


@pytest.fixture(params=[False, True], ids=["asymmetric", "symmetric"])
def gpg(request, fake_gpg):
    return GPGEncryption(
        command=fake_gpg,
        args=["--no-tty"],
        recipient="user@example.com",
        symmetric=request.param,
    )


def test_encrypt_decrypt(gpg):
    ciphertext = gpg.encrypt(PLAINTEXT)
    assert ciphertext
    assert ciphertext != PLAINTEXT
    assert gpg.decrypt(ciphertext) == PLAINTEXT


def test_decrypt_to_file(gpg, tmp_path):
    ciphertext = gpg.encrypt(PLAINTEXT)
    target = tmp_path / "plaintext"
    gpg.decrypt_to_file(str(target), ciphertext)
    assert target.read_bytes() == PLAINTEXT


def test_encrypt_file(gpg, tmp_path):
    source = tmp_path / "plaintext"
    source.write_bytes(PLAINTEXT)
    ciphertext = gpg.encrypt_file(str(source))
    assert ciphertext != PLAINTEXT
    assert gpg.decrypt(ciphertext) == PLAINTEXT


def test_command_failure_raises(fake_gpg):
    gpg = GPGEncryption(command=fake_gpg)
    with pytest.raises(subprocess.CalledProcessError):
        gpg.encrypt(PLAINTEXT)


def test_encrypted_suffix():
    assert GPGEncryption(suffix=".asc").encrypted_suffix() == ".asc"


def test_encrypt_args_asymmetric():
    gpg = GPGEncryption(args=["--no-tty"], recipient="user@example.com")
    assert gpg.encrypt_args("/p", "/c") == [
        "--armor",
        "--output",
        "/c",
        "--recipient",
        "user@example.com",
        "--no-tty",
        "--encrypt",
        "/p",
    ]


def test_encrypt_args_symmetric():
    gpg = GPGEncryption(args=["--no-tty"], recipient="user@example.com", symmetric=True)
    assert gpg.encrypt_args("/p", "/c") == [
        "--armor",
        "--output",
        "/c",
        "--symmetric",
        "--no-tty",
        "/p",
    ]


def test_encrypt_args_without_recipient():
    assert GPGEncryption().encrypt_args("/p", "/c") == [
        "--armor",
        "--output",
        "/c",
        "--encrypt",
        "/p",
    ]


def test_decrypt_args():
    gpg = GPGEncryption(args=["--no-tty"])
    assert gpg.decrypt_args("/p", "/c") == ["--output", "/p", "--no-tty", "--decrypt", "/c"]


def test_private_temp_dir_is_private_and_removed():
    with private_temp_dir() as temp_dir:
        assert temp_dir.is_dir()
        if os.name != "nt":
            assert stat.S_IMODE(temp_dir.stat().st_mode) == 0o700
        (temp_dir / "file").write_bytes(b"data")
    assert not temp_dir.exists()