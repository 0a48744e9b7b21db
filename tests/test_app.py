import pytest
from pathlib import Path
from typing import Generator
from click.testing import CliRunner
import tempfile

from radium226.encryption_tool import (
    app,
    KeyPair,
    Layout,
    write_key_pair,
    encrypt_message,
    decrypt_message,
    read_public_key,
)


@pytest.fixture(autouse=True)
def no_passphrase_env_var(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ENCRYPTION_TOOL_PASSPHRASE", raising=False)


@pytest.fixture
def folder_path(key_pair: KeyPair) -> Generator[Path, None, None]:
    with tempfile.TemporaryDirectory() as tmpdir:
        folder_path = Path(tmpdir)
        (folder_path / ".git").mkdir()
        write_key_pair(Layout(folder_path=folder_path), key_pair)
        yield folder_path


def test_cli_generate_command() -> None:
    """Test the CLI generate command writes a usable key pair."""
    runner = CliRunner()

    with tempfile.TemporaryDirectory() as tmpdir:
        tmpdir_path = Path(tmpdir)

        result = runner.invoke(app, [
            "-C", str(tmpdir_path),
            "generate",
            "-p", "my passphrase",
        ])

        assert result.exit_code == 0, f"Command failed: {result.output}"
        assert "KEYPAIR GENERATED SUCCESSFULLY" in result.output
        assert str(tmpdir_path / "keys" / "privatekey.pem") in result.output

        layout = Layout(folder_path=tmpdir_path)
        ciphertext = encrypt_message(read_public_key(layout), "hello world")
        private_key = layout.private_key_file_path.read_bytes()
        assert decrypt_message(private_key, "my passphrase", ciphertext) == "hello world"


def test_cli_generate_command_refuses_to_overwrite(folder_path: Path, key_pair: KeyPair) -> None:
    runner = CliRunner()
    layout = Layout(folder_path=folder_path)
    layout.public_key_file_path.write_bytes(b"untouched")

    result = runner.invoke(app, ["-C", str(folder_path), "generate", "-p", "my passphrase"])

    assert result.exit_code == 1
    assert "THE KEYPAIR COULD NOT BE GENERATED" in result.output
    assert "--force" in result.output
    assert layout.public_key_file_path.read_bytes() == b"untouched"
    assert layout.private_key_file_path.read_bytes() == key_pair.private_key


def test_cli_generate_command_rejects_empty_passphrase(folder_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["-C", str(folder_path), "generate", "--force", "-p", ""])

    assert result.exit_code == 2
    assert "The passphrase must not be empty" in result.output


def test_cli_encrypt_and_decrypt_commands(folder_path: Path, passphrase: str) -> None:
    """Test the CLI encrypt then decrypt commands go through the message files."""
    runner = CliRunner()

    result = runner.invoke(app, ["-C", str(folder_path), "encrypt", "-m", "hello world"])
    assert result.exit_code == 0, f"Command failed: {result.output}"
    assert "MESSAGE ENCRYPTED SUCCESSFULLY" in result.output
    ciphertext = (folder_path / "encrypted-message.txt").read_text(encoding="utf-8")
    assert ciphertext in result.output

    result = runner.invoke(app, ["-C", str(folder_path), "decrypt", "-p", passphrase])
    assert result.exit_code == 0, f"Command failed: {result.output}"
    assert "MESSAGE DECRYPTED SUCCESSFULLY" in result.output
    assert "Output: hello world" in result.output
    assert (folder_path / "decrypted-message.txt").read_text(encoding="utf-8") == "hello world"


@pytest.mark.filterwarnings("error::DeprecationWarning")
def test_cli_encrypt_command_with_stdin(folder_path: Path, key_pair: KeyPair, passphrase: str) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["-C", str(folder_path), "encrypt", "-m", "-"], input="from stdin")

    assert result.exit_code == 0, f"Command failed: {result.output}"
    ciphertext = (folder_path / "encrypted-message.txt").read_text(encoding="utf-8")
    assert decrypt_message(key_pair.private_key, passphrase, ciphertext) == "from stdin"


def test_cli_encrypt_command_with_too_large_message(folder_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["-C", str(folder_path), "encrypt", "-m", "x" * 471])

    assert result.exit_code == 1
    assert "THE STRING COULD NOT BE ENCRYPTED" in result.output
    assert not (folder_path / "encrypted-message.txt").exists()


def test_cli_encrypt_command_without_keys() -> None:
    runner = CliRunner()

    with tempfile.TemporaryDirectory() as tmpdir:
        result = runner.invoke(app, ["-C", tmpdir, "encrypt", "-m", "hello world"])

        assert result.exit_code == 1
        assert "THE STRING COULD NOT BE ENCRYPTED" in result.output
        assert "Please run the generate command to generate encryption keys." in result.output


def test_cli_decrypt_command_without_encrypted_message(folder_path: Path, passphrase: str) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["-C", str(folder_path), "decrypt", "-p", passphrase])

    assert result.exit_code == 1
    assert "THE STRING COULD NOT BE DECRYPTED" in result.output
    assert "Please use the encrypt command first" in result.output


def test_cli_decrypt_command_with_wrong_passphrase(folder_path: Path, key_pair: KeyPair) -> None:
    runner = CliRunner()
    (folder_path / "encrypted-message.txt").write_text(encrypt_message(key_pair.public_key, "hello world"), encoding="utf-8")

    result = runner.invoke(app, ["-C", str(folder_path), "decrypt", "-p", "wrong passphrase"])

    assert result.exit_code == 1
    assert "THE STRING COULD NOT BE DECRYPTED" in result.output
    assert "The passphrase does not unlock the private key." in result.output
    assert not (folder_path / "decrypted-message.txt").exists()


def test_cli_decrypt_command_with_file_and_prompt(folder_path: Path, key_pair: KeyPair, passphrase: str) -> None:
    runner = CliRunner()
    file_path = folder_path / "other-message.txt"
    file_path.write_text(encrypt_message(key_pair.public_key, "prompted") + "\n", encoding="utf-8")

    result = runner.invoke(app, ["-C", str(folder_path), "decrypt", str(file_path)], input=f"{passphrase}\n")

    assert result.exit_code == 0, f"Command failed: {result.output}"
    assert (folder_path / "decrypted-message.txt").read_text(encoding="utf-8") == "prompted"


def test_cli_decrypt_command_with_passphrase_file(folder_path: Path, key_pair: KeyPair, passphrase: str) -> None:
    runner = CliRunner()
    (folder_path / "encryption-tool.passphrase").write_text(f"{passphrase}\n", encoding="utf-8")
    (folder_path / "encrypted-message.txt").write_text(encrypt_message(key_pair.public_key, "hello world"), encoding="utf-8")

    result = runner.invoke(app, ["-C", str(folder_path), "decrypt"])

    assert result.exit_code == 0, f"Command failed: {result.output}"
    assert "Output: hello world" in result.output


def test_cli_with_layout_file(key_pair: KeyPair, passphrase: str) -> None:
    runner = CliRunner()

    with tempfile.TemporaryDirectory() as tmpdir:
        tmpdir_path = Path(tmpdir)
        (tmpdir_path / ".git").mkdir()
        (tmpdir_path / "encryption-tool.yaml").write_text("keys_folder: secrets\nencrypted_message_file: message.b64\n", encoding="utf-8")
        sub_folder_path = tmpdir_path / "sub"
        sub_folder_path.mkdir()
        write_key_pair(Layout(folder_path=tmpdir_path, keys_folder=Path("secrets")), key_pair)

        # Layout discovery starts from the current folder, so run from the sub folder
        with pytest.MonkeyPatch.context() as monkeypatch:
            monkeypatch.chdir(sub_folder_path)
            result = runner.invoke(app, ["encrypt", "-m", "hello world"])

        assert result.exit_code == 0, f"Command failed: {result.output}"
        ciphertext = (tmpdir_path / "message.b64").read_text(encoding="utf-8")
        assert decrypt_message(key_pair.private_key, passphrase, ciphertext) == "hello world"


def test_cli_info_command(folder_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["-C", str(folder_path), "info"])

    assert result.exit_code == 0, f"Command failed: {result.output}"
    assert f"Public key: {folder_path / 'keys' / 'publickey.pem'} (present)" in result.output
    assert f"Encrypted message: {folder_path / 'encrypted-message.txt'} (missing)" in result.output
    assert "Key size: 4096 bits" in result.output
    assert "Max message size: 470 bytes" in result.output


def test_cli_decrypt_command_with_folder_as_file(folder_path: Path, passphrase: str) -> None:
    runner = CliRunner()
    other_folder_path = folder_path / "a-folder"
    other_folder_path.mkdir()

    result = runner.invoke(app, ["-C", str(folder_path), "decrypt", "-p", passphrase, str(other_folder_path)])

    assert result.exit_code == 1
    assert "THE STRING COULD NOT BE DECRYPTED" in result.output
    assert f"Unable to read {str(other_folder_path)!r}" in result.output
    assert not (folder_path / "decrypted-message.txt").exists()
