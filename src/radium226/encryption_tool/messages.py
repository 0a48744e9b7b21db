from base64 import b64encode, b64decode
from binascii import Error as BinasciiError
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from loguru import logger

from .keys import load_public_key, load_private_key
from .types import (
    KEY_SIZE,
    Ciphertext,
    Message,
    Passphrase,
    PrivateKey,
    PublicKey,
    EncryptionError,
    MessageTooLargeError,
    CorruptedCiphertextError,
    NonTextMessageError,
)



def _padding() -> padding.OAEP:
    # Default padding of OpenSSL's RSA_PKCS1_OAEP_PADDING
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA1()),
        algorithm=hashes.SHA1(),
        label=None,
    )



def max_message_size(key_size: int = KEY_SIZE) -> int:
    """Largest message, in bytes, that a single encryption with a key of `key_size` bits accepts."""
    return (key_size + 7) // 8 - 2 * hashes.SHA1.digest_size - 2



def encrypt_message(public_key: PublicKey, message: Message | bytes) -> Ciphertext:
    """
    Encrypt a message with a PEM encoded public key.

    Args:
        public_key: PEM encoded SPKI public key
        message: Text (encoded as UTF-8) or bytes to encrypt

    Returns:
        The base64 encoded ciphertext

    Raises:
        InvalidPublicKeyError: If the public key cannot be loaded
        MessageTooLargeError: If the message does not fit in the key's modulus
        EncryptionError: If the encryption itself failed
    """
    message_bytes = message.encode("utf-8") if isinstance(message, str) else message

    key = load_public_key(public_key)
    if len(message_bytes) > (size := max_message_size(key.key_size)):
        raise MessageTooLargeError(len(message_bytes), size)

    logger.debug("Encrypting {message_size} bytes with a {key_size}-bit key... ", message_size=len(message_bytes), key_size=key.key_size)
    try:
        ciphertext_bytes = key.encrypt(message_bytes, _padding())
    except ValueError as e:
        raise EncryptionError(f"The message could not be encrypted: {e}") from e

    return b64encode(ciphertext_bytes).decode("utf-8")



def decrypt_message(private_key: PrivateKey, passphrase: Passphrase, ciphertext: Ciphertext) -> Message:
    """
    Decrypt a base64 encoded ciphertext with a passphrase-protected PEM private key.

    Raises:
        WrongPassphraseError: If the passphrase does not unlock the private key
        InvalidPrivateKeyError: If the private key cannot be loaded
        CorruptedCiphertextError: If the ciphertext was tampered with or was not produced for this key
        NonTextMessageError: If the decrypted bytes are not UTF-8 text
    """
    try:
        ciphertext_bytes = b64decode(ciphertext.strip().encode("utf-8"), validate=True)
    except (BinasciiError, UnicodeEncodeError) as e:
        raise CorruptedCiphertextError(f"The ciphertext is not valid base64: {e}") from e

    key = load_private_key(private_key, passphrase)
    if len(ciphertext_bytes) != (size := (key.key_size + 7) // 8):
        raise CorruptedCiphertextError(f"The ciphertext is {len(ciphertext_bytes)} bytes long but {size} bytes were expected for this key.")

    logger.debug("Decrypting {ciphertext_size} bytes... ", ciphertext_size=len(ciphertext_bytes))
    try:
        message_bytes = key.decrypt(ciphertext_bytes, _padding())
    except ValueError as e:
        raise CorruptedCiphertextError("The ciphertext could not be decrypted with this key.") from e

    try:
        return message_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        raise NonTextMessageError() from e
