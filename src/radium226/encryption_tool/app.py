from click import option, Context, pass_context, argument, group, prompt, echo, style, secho, Choice
from click.exceptions import Exit
from loguru import logger
from typing import Generator, cast
from types import SimpleNamespace
from contextlib import contextmanager
from pathlib import Path
import sys

from .types import Layout, Passphrase, InputKind, EncryptionToolError, MissingInputError
from .click import PASSPHRASE, from_stdin
from .keys import generate_key_pair, key_size_of
from .messages import encrypt_message, decrypt_message, max_message_size
from .layout import (
    find_layout,
    find_passphrase,
    check_no_key_pair,
    read_public_key,
    read_private_key,
    read_encrypted_message,
    write_key_pair,
    write_encrypted_message,
    write_decrypted_message,
)



LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


HINTS = {
    InputKind.PUBLIC_KEY: "Please run the generate command to generate encryption keys.",
    InputKind.PRIVATE_KEY: "Please run the generate command to generate encryption keys.",
    InputKind.ENCRYPTED_MESSAGE: "Please use the encrypt command first to generate 'encrypted-message.txt'.",
}



def _banner(text: str, color: str) -> str:
    return style(f"\n *** {text} *** \n".upper(), fg=color, bold=True, reverse=True)



@contextmanager
def _report_errors(title: str) -> Generator[None, None, None]:
    try:
        yield
    except EncryptionToolError as e:
        logger.debug("{error_type} raised: {error}", error_type=type(e).__name__, error=e)
        echo(_banner(title, "red") + "\n", err=True)
        secho(f"{e}\n", fg="red", bold=True, err=True)
        if isinstance(e, MissingInputError):
            secho(f"{HINTS[e.kind]}\n", fg="red", bold=True, err=True)
        raise Exit(1)



def _resolve_passphrase(passphrase: Passphrase | None, layout: Layout, *, confirm: bool) -> Passphrase:
    if passphrase:
        return passphrase
    if passphrase := find_passphrase(layout.folder_path):
        return passphrase
    return cast(Passphrase, prompt("Passphrase", hide_input=True, confirmation_prompt=confirm, type=PASSPHRASE))



@group()
@option(
    "--folder",
    "-C",
    "folder_path",
    type=Path,
    required=False,
    default=None,
    help="Folder holding the keys and messages (defaults to the one of the nearest encryption-tool.yaml, or the current folder).",
)
@option(
    "--log-level",
    "log_level",
    type=Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@pass_context
def app(
    context: Context,
    folder_path: Path | None,
    log_level: str,
) -> None:
    """Generate an RSA key pair, then encrypt and decrypt short messages with it."""
    logger.remove()
    logger.add(sys.stderr, level=log_level.upper())
    logger.debug("App started! ")

    context.obj = SimpleNamespace()
    with _report_errors("An error occurred and the layout could not be loaded"):
        layout = find_layout(folder_path)
    if folder_path is not None:
        layout = layout.with_folder_path(folder_path.absolute())
    context.obj.layout = layout



@app.command()
@option(
    "--passphrase",
    "-p",
    "passphrase",
    type=PASSPHRASE,
    required=False,
    help="A short string passphrase to encrypt the private key for secure storage.",
)
@option(
    "--force",
    "-f",
    "force",
    is_flag=True,
    default=False,
    help="Overwrite existing keys.",
)
@pass_context
def generate(context: Context, passphrase: Passphrase | None, force: bool) -> None:
    """Generates a pair of private and public keys and stores them in the filesystem."""
    layout = cast(Layout, context.obj.layout)

    with _report_errors("An error occurred and the keypair could not be generated"):
        if not force:
            check_no_key_pair(layout)
        passphrase = _resolve_passphrase(passphrase, layout, confirm=True)
        key_pair = generate_key_pair(passphrase)
        write_key_pair(layout, key_pair, overwrite=force)

    echo(_banner("keypair generated successfully", "bright_green") + "\n")
    secho(f"Output: {layout.private_key_file_path}", fg="bright_green", bold=True)
    secho(f"Output: {layout.public_key_file_path}\n", fg="bright_green", bold=True)



@app.command()
@option(
    "--message",
    "-m",
    "message",
    type=str,
    required=True,
    callback=from_stdin,
    help="A plaintext message to encrypt ('-' to read it from stdin).",
)
@pass_context
def encrypt(context: Context, message: str) -> None:
    """Encrypts the provided plaintext message and outputs the result to encrypted-message.txt"""
    layout = cast(Layout, context.obj.layout)

    with _report_errors("An error occurred and the string could not be encrypted"):
        public_key = read_public_key(layout)
        ciphertext = encrypt_message(public_key, message)
        file_path = write_encrypted_message(layout, ciphertext)

    echo(_banner("message encrypted successfully", "bright_green") + "\n")
    secho(f"Output: {file_path}\n", fg="bright_green", bold=True)
    secho(f"{ciphertext}\n", fg="bright_green", bold=True)



@app.command()
@argument("file_path", type=Path, required=False)
@option(
    "--passphrase",
    "-p",
    "passphrase",
    type=PASSPHRASE,
    required=False,
    help="The passphrase used when generating the private key.",
)
@pass_context
def decrypt(context: Context, file_path: Path | None, passphrase: Passphrase | None) -> None:
    """Decrypts the provided text file and outputs the result to decrypted-message.txt"""
    layout = cast(Layout, context.obj.layout)

    with _report_errors("An error occurred and the string could not be decrypted"):
        ciphertext = read_encrypted_message(layout, file_path)
        private_key = read_private_key(layout)
        passphrase = _resolve_passphrase(passphrase, layout, confirm=False)
        message = decrypt_message(private_key, passphrase, ciphertext)
        output_file_path = write_decrypted_message(layout, message)

    echo(_banner("message decrypted successfully", "bright_green") + "\n")
    secho(f"Output to: {output_file_path}\n", fg="bright_green", bold=True)
    secho(f"Output: {message}\n", fg="bright_green", bold=True)



@app.command()
@pass_context
def info(context: Context) -> None:
    """Shows where the keys and messages are stored."""
    layout = cast(Layout, context.obj.layout)

    for label, file_path in [
        ("Public key", layout.public_key_file_path),
        ("Private key", layout.private_key_file_path),
        ("Encrypted message", layout.encrypted_message_file_path),
        ("Decrypted message", layout.decrypted_message_file_path),
    ]:
        state = style("present", fg="bright_green") if file_path.exists() else style("missing", fg="yellow")
        echo(f"{label}: {file_path} ({state})")

    if not layout.public_key_file_path.exists():
        return

    with _report_errors("An error occurred and the public key could not be read"):
        key_size = key_size_of(read_public_key(layout))
    echo(f"Key size: {key_size} bits")
    echo(f"Max message size: {max_message_size(key_size)} bytes")
