import pytest

from radium226.encryption_tool import KeyPair, generate_key_pair


PASSPHRASE = "correct horse battery staple"


@pytest.fixture(scope="session")
def passphrase() -> str:
    return PASSPHRASE


@pytest.fixture(scope="session")
def key_pair(passphrase: str) -> KeyPair:
    return generate_key_pair(passphrase)
