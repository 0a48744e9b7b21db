from typing import overload
from pathlib import Path
from dataclasses import fields
from loguru import logger
import os
import yaml

from .files import Content, write_all_atomically
from .types import (
    Layout,
    KeyPair,
    Passphrase,
    PublicKey,
    PrivateKey,
    Ciphertext,
    Message,
    InputKind,
    MissingInputError,
    UnreadableInputError,
    OutputError,
    KeyPairExistsError,
    ConfigurationError,
)



LAYOUT_FILE_NAME = "encryption-tool.yaml"


PASSPHRASE_FILE_NAME = "encryption-tool.passphrase"


PASSPHRASE_ENV_VAR = "ENCRYPTION_TOOL_PASSPHRASE"


LAYOUT_KEYS = [field.name for field in fields(Layout) if field.name != "folder_path"]



@overload
def load_layout(file_path: Path, /) -> Layout: ...



@overload
def load_layout(text: str, /, *, folder_path: Path) -> Layout: ...



def load_layout(text_or_file_path: str | Path, /, *, folder_path: Path | None = None) -> Layout:
    if isinstance(text_or_file_path, Path):
        text = text_or_file_path.read_text(encoding="utf-8")
        folder_path = text_or_file_path.parent
    else:
        text = text_or_file_path

    assert folder_path is not None, "A folder path is required when loading a layout from text."

    try:
        obj = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid layout file: {e}") from e

    if not isinstance(obj, dict):
        raise ConfigurationError(f"Expected a mapping in the layout file, got {type(obj).__name__}")

    if unknown_keys := sorted(set(obj) - set(LAYOUT_KEYS)):
        raise ConfigurationError(f"Unknown keys in the layout file: {unknown_keys}. Available keys: {LAYOUT_KEYS}")

    return Layout(
        folder_path=folder_path,
        **{key: Path(str(value)) for key, value in obj.items()},
    )



def find_layout(folder_path: Path | None = None) -> Layout:
    start_folder_path = folder_path = (folder_path or Path.cwd()).absolute()
    while True:
        if (layout_file_path := folder_path / LAYOUT_FILE_NAME).exists():
            logger.info("Using layout from {layout_file_path}! ", layout_file_path=layout_file_path)
            return load_layout(layout_file_path)

        if ( folder_path / ".git" ).exists():
            logger.warning(f"Reached the git root folder without finding a {LAYOUT_FILE_NAME!r} file.")
            break

        if folder_path.parent == folder_path:
            break

        folder_path = folder_path.parent

    return Layout(folder_path=start_folder_path)



def find_passphrase(folder_path: Path | None = None) -> Passphrase | None:
    if (passphrase := os.getenv(PASSPHRASE_ENV_VAR)) is not None:
        logger.info(f"Using passphrase from {PASSPHRASE_ENV_VAR}! ")
        return passphrase

    folder_path = (folder_path or Path.cwd()).absolute()
    while True:
        if (passphrase_file_path := folder_path / PASSPHRASE_FILE_NAME).exists():
            logger.info("Using passphrase from {passphrase_file_path}! ", passphrase_file_path=passphrase_file_path)
            return passphrase_file_path.read_text(encoding="utf-8").rstrip("\r\n")

        if ( folder_path / ".git" ).exists():
            logger.warning(f"Reached the git root folder without finding a {PASSPHRASE_FILE_NAME!r} file.")
            break

        if folder_path.parent == folder_path:
            break

        folder_path = folder_path.parent

    return None



def _read_bytes(file_path: Path, kind: InputKind) -> bytes:
    try:
        return file_path.read_bytes()
    except FileNotFoundError as e:
        raise MissingInputError(file_path, kind) from e
    except OSError as e:
        raise UnreadableInputError(file_path, kind, e.strerror or str(e)) from e



def _write(contents: list[tuple[Path, Content, int]]) -> None:
    try:
        write_all_atomically(contents)
    except OSError as e:
        file_path = Path(e.filename) if e.filename is not None else contents[0][0]
        raise OutputError(file_path, e.strerror or str(e)) from e



def read_public_key(layout: Layout) -> PublicKey:
    return _read_bytes(layout.public_key_file_path, InputKind.PUBLIC_KEY)



def read_private_key(layout: Layout) -> PrivateKey:
    return _read_bytes(layout.private_key_file_path, InputKind.PRIVATE_KEY)



def read_encrypted_message(layout: Layout, file_path: Path | None = None) -> Ciphertext:
    file_path = file_path or layout.encrypted_message_file_path
    return _read_bytes(file_path, InputKind.ENCRYPTED_MESSAGE).decode("utf-8", errors="replace")



def check_no_key_pair(layout: Layout) -> None:
    file_paths = [layout.public_key_file_path, layout.private_key_file_path]
    if existing_file_paths := [file_path for file_path in file_paths if file_path.exists()]:
        raise KeyPairExistsError(existing_file_paths)



def write_key_pair(layout: Layout, key_pair: KeyPair, *, overwrite: bool = False) -> None:
    if not overwrite:
        check_no_key_pair(layout)

    logger.debug("Writing key pair to {keys_folder_path}... ", keys_folder_path=layout.keys_folder_path)
    _write([
        (layout.private_key_file_path, key_pair.private_key, 0o600),
        (layout.public_key_file_path, key_pair.public_key, 0o644),
    ])



def write_encrypted_message(layout: Layout, ciphertext: Ciphertext) -> Path:
    file_path = layout.encrypted_message_file_path
    logger.debug("Writing encrypted message to {file_path}... ", file_path=file_path)
    _write([(file_path, ciphertext, 0o644)])
    return file_path



def write_decrypted_message(layout: Layout, message: Message) -> Path:
    file_path = layout.decrypted_message_file_path
    logger.debug("Writing decrypted message to {file_path}... ", file_path=file_path)
    _write([(file_path, message, 0o644)])
    return file_path
