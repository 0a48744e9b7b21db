from dataclasses import dataclass, replace
from typing import TypeAlias
from enum import StrEnum, auto
from pathlib import Path



KEY_SIZE = 4096


PUBLIC_EXPONENT = 65537



PublicKey: TypeAlias = bytes



PrivateKey: TypeAlias = bytes



Passphrase: TypeAlias = str



Message: TypeAlias = str



Ciphertext: TypeAlias = str



@dataclass(frozen=True, eq=True)
class KeyPair():
    public_key: PublicKey
    private_key: PrivateKey



class InputKind(StrEnum):
    PUBLIC_KEY = auto()
    PRIVATE_KEY = auto()
    ENCRYPTED_MESSAGE = auto()



@dataclass(frozen=True, eq=True)
class Layout():
    folder_path: Path
    keys_folder: Path = Path("keys")
    public_key_file: Path = Path("publickey.pem")
    private_key_file: Path = Path("privatekey.pem")
    encrypted_message_file: Path = Path("encrypted-message.txt")
    decrypted_message_file: Path = Path("decrypted-message.txt")

    def with_folder_path(self, folder_path: Path) -> "Layout":
        return replace(self, folder_path=folder_path)

    @property
    def keys_folder_path(self) -> Path:
        return self.folder_path / self.keys_folder

    @property
    def public_key_file_path(self) -> Path:
        return self.keys_folder_path / self.public_key_file

    @property
    def private_key_file_path(self) -> Path:
        return self.keys_folder_path / self.private_key_file

    @property
    def encrypted_message_file_path(self) -> Path:
        return self.folder_path / self.encrypted_message_file

    @property
    def decrypted_message_file_path(self) -> Path:
        return self.folder_path / self.decrypted_message_file



class EncryptionToolError(Exception):
    pass



class GenerationError(EncryptionToolError):
    pass


class EmptyPassphraseError(GenerationError):

    def __init__(self) -> None:
        super().__init__("The passphrase must not be empty.")



class EncryptionError(EncryptionToolError):
    pass


class InvalidPublicKeyError(EncryptionError):
    pass


class MessageTooLargeError(EncryptionError):

    def __init__(self, message_size: int, max_message_size: int) -> None:
        super().__init__(f"The message is {message_size} bytes long but at most {max_message_size} bytes can be encrypted with this key.")
        self.message_size = message_size
        self.max_message_size = max_message_size



class DecryptionError(EncryptionToolError):
    pass


class WrongPassphraseError(DecryptionError):

    def __init__(self) -> None:
        super().__init__("The passphrase does not unlock the private key.")


class InvalidPrivateKeyError(DecryptionError):
    pass


class CorruptedCiphertextError(DecryptionError):
    pass


class NonTextMessageError(DecryptionError):

    def __init__(self) -> None:
        super().__init__("The decrypted message is not valid UTF-8 text.")



class MissingInputError(EncryptionToolError):

    def __init__(self, file_path: Path, kind: InputKind) -> None:
        super().__init__(f"No such file: {str(file_path)!r}")
        self.file_path = file_path
        self.kind = kind



class UnreadableInputError(EncryptionToolError):

    def __init__(self, file_path: Path, kind: InputKind, reason: str) -> None:
        super().__init__(f"Unable to read {str(file_path)!r}: {reason}")
        self.file_path = file_path
        self.kind = kind



class OutputError(EncryptionToolError):

    def __init__(self, file_path: Path, reason: str) -> None:
        super().__init__(f"Unable to write {str(file_path)!r}: {reason}")
        self.file_path = file_path



class KeyPairExistsError(EncryptionToolError):

    def __init__(self, file_paths: list[Path]) -> None:
        super().__init__(f"Keys already exist: {', '.join(repr(str(file_path)) for file_path in file_paths)}. Use --force to overwrite them.")
        self.file_paths = file_paths



class ConfigurationError(EncryptionToolError):
    pass
