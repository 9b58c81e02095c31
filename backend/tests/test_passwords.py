"""
Credential hashing and legacy-form tests.

Verifies:
- bcrypt hashes verify and are salted
- Plain-text and base64 legacy forms classify as LEGACY
- Malformed stored forms never raise
- Minimum and maximum password length are enforced
"""

import base64

import pytest

from leasedesk.errors import ValidationError
from leasedesk.services.passwords import CredentialMatch, PasswordHasher, is_current_scheme


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4, min_length=6)


class TestCurrentScheme:
    def test_hash_verifies(self, hasher):
        stored = hasher.hash("correct horse")
        assert is_current_scheme(stored)
        assert hasher.verify(stored, "correct horse")
        assert not hasher.verify(stored, "wrong horse")

    def test_hashes_are_salted(self, hasher):
        assert hasher.hash("same-password") != hasher.hash("same-password")

    def test_check_current(self, hasher):
        stored = hasher.hash("secret99")
        assert hasher.check(stored, "secret99") is CredentialMatch.CURRENT
        assert hasher.check(stored, "secret98") is CredentialMatch.NONE

    def test_longest_accepted_password(self, hasher):
        password = "x" * 72
        stored = hasher.hash(password)
        assert hasher.verify(stored, password)

    def test_passwords_sharing_bcrypt_prefix_differ(self, hasher):
        stored = hasher.hash("a" * 71 + "x")
        assert not hasher.verify(stored, "a" * 71 + "y")
        assert not hasher.verify(stored, "a" * 71 + "x" + "y")
        assert hasher.check(stored, "a" * 71 + "xy") is CredentialMatch.NONE

    def test_over_limit_is_refused(self, hasher):
        with pytest.raises(ValidationError):
            hasher.hash("a" * 72 + "x")
        # multi-byte characters count by encoded length
        with pytest.raises(ValidationError):
            hasher.hash("é" * 37)


class TestLegacyForms:
    def test_plaintext_is_legacy(self, hasher):
        assert hasher.check("plainpass", "plainpass") is CredentialMatch.LEGACY

    def test_base64_is_legacy(self, hasher):
        stored = base64.b64encode(b"secret99").decode()
        assert hasher.check(stored, "secret99") is CredentialMatch.LEGACY

    def test_legacy_mismatch(self, hasher):
        assert hasher.check("plainpass", "other") is CredentialMatch.NONE
        assert hasher.check(base64.b64encode(b"secret99").decode(), "secret98") is CredentialMatch.NONE

    def test_verify_rejects_legacy_forms(self, hasher):
        """verify() only accepts bcrypt; legacy forms go through check()."""
        assert not hasher.verify("plainpass", "plainpass")


class TestMalformedStoredForms:
    @pytest.mark.parametrize("stored", [None, "", "$2b$", "$2b$12$short", "$2b$xx$not-a-real-hash-at-all"])
    def test_never_raises(self, hasher, stored):
        assert hasher.verify(stored, "anything") is False
        assert hasher.check(stored, "anything") is CredentialMatch.NONE

    @pytest.mark.parametrize("stored", [123, 1.5, ["$2b$"], {"hash": "$2b$"}])
    def test_non_string_is_not_current_scheme(self, stored):
        assert is_current_scheme(stored) is False

    def test_burn_does_not_raise(self, hasher):
        hasher.burn("whatever")
        hasher.burn(None)


class TestPasswordPolicy:
    def test_too_short(self, hasher):
        with pytest.raises(ValidationError):
            hasher.validate_new_password("abc")

    def test_empty(self, hasher):
        with pytest.raises(ValidationError):
            hasher.validate_new_password("")

    def test_long_enough(self, hasher):
        hasher.validate_new_password("abcdef")

    def test_too_long(self, hasher):
        hasher.validate_new_password("a" * 72)
        with pytest.raises(ValidationError):
            hasher.validate_new_password("a" * 73)
