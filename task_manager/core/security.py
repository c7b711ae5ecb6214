from typing import Protocol

import bcrypt

MAX_BCRYPT_BYTES = 72
BCRYPT_ROUNDS = 12


class Hasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, plain: str, hashed: str) -> bool: ...


class BcryptHasher:
    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return hash_password(password, rounds=self.rounds)

    def verify(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    # bcrypt >= 4.1 rejects secrets longer than 72 bytes instead of truncating
    return bcrypt.hashpw(
        password.encode("utf-8")[:MAX_BCRYPT_BYTES],
        bcrypt.gensalt(rounds=rounds)
    ).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:MAX_BCRYPT_BYTES], hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
