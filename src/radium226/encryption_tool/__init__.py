from .app import app
from .types import (
    KEY_SIZE,
    PUBLIC_EXPONENT,
    PublicKey,
    PrivateKey,
    Passphrase,
    Message,
    Ciphertext,
    KeyPair,
    Layout,
    InputKind,
    EncryptionToolError,
    GenerationError,
    EmptyPassphraseError,
    EncryptionError,
    InvalidPublicKeyError,
    MessageTooLargeError,
    DecryptionError,
    WrongPassphraseError,
    InvalidPrivateKeyError,
    CorruptedCiphertextError,
    NonTextMessageError,
    MissingInputError,
    UnreadableInputError,
    OutputError,
    KeyPairExistsError,
    ConfigurationError,
)
from .keys import (
    generate_key_pair,
    key_size_of,
)
from .messages import (
    encrypt_message,
    decrypt_message,
    max_message_size,
)
from .layout import (
    load_layout,
    find_layout,
    find_passphrase,
    read_public_key,
    read_private_key,
    read_encrypted_message,
    write_key_pair,
    write_encrypted_message,
    write_decrypted_message,
)


__all__ = [
    "app",
    "KEY_SIZE",
    "PUBLIC_EXPONENT",
    "PublicKey",
    "PrivateKey",
    "Passphrase",
    "Message",
    "Ciphertext",
    "KeyPair",
    "Layout",
    "InputKind",
    "EncryptionToolError",
    "GenerationError",
    "EmptyPassphraseError",
    "EncryptionError",
    "InvalidPublicKeyError",
    "MessageTooLargeError",
    "DecryptionError",
    "WrongPassphraseError",
    "InvalidPrivateKeyError",
    "CorruptedCiphertextError",
    "NonTextMessageError",
    "MissingInputError",
    "UnreadableInputError",
    "OutputError",
    "KeyPairExistsError",
    "ConfigurationError",
    "generate_key_pair",
    "key_size_of",
    "encrypt_message",
    "decrypt_message",
    "max_message_size",
    "load_layout",
    "find_layout",
    "find_passphrase",
    "read_public_key",
    "read_private_key",
    "read_encrypted_message",
    "write_key_pair",
    "write_encrypted_message",
    "write_decrypted_message",
]
