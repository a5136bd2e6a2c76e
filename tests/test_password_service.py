"""
Tests for PasswordHasher
"""
import pytest
from taskwatch.modules.users.services.password_service import PasswordHasher


@pytest.fixture
def hasher():
    return PasswordHasher(n=2 ** 10)


def test_hash_and_check(hasher):
    password_hash = hasher.hash("correct horse battery")

    assert password_hash.startswith("scrypt$1024$8$1$")
    assert hasher.check("correct horse battery", password_hash)
    assert not hasher.check("correct horse batterY", password_hash)


def test_hashes_are_salted(hasher):
    assert hasher.hash("same password") != hasher.hash("same password")


def test_check_uses_parameters_from_hash(hasher):
    stronger = PasswordHasher(n=2 ** 11)

    assert hasher.check("portable secret", stronger.hash("portable secret"))


@pytest.mark.parametrize("password_hash", [
    None,
    "",
    "not-a-hash",
    "bcrypt$10$8$1$c2FsdA==$ZGlnZXN0",
    "scrypt$1024$8$1$!!!$???",
    "scrypt$1000$8$1$c2FsdA==$ZGlnZXN0",
])
def test_unusable_hashes_never_match(hasher, password_hash):
    assert hasher.check("anything", password_hash) is False
