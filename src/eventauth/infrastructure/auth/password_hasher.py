"""Salted password hashing and verification using Argon2.

Every password is combined with a system-wide salt before it reaches
Argon2id. The resulting hash string embeds Argon2's own per-hash salt and
work-factor parameters, so only the system salt has to be configured.
"""

from functools import cached_property

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from eventauth.domain.exceptions import CredentialMismatchError, EmptyCredentialError


class PasswordVerifier:
    """Hash and verify passwords with a fixed system-wide salt."""

    def __init__(self, salt: str, hasher: PasswordHasher | None = None) -> None:
        """Initialize the verifier.

        Args:
            salt: System-wide salt appended to every password.
            hasher: Argon2 hasher to use. Defaults to Argon2id with the
                    library's recommended work factor.
        """
        self._salt = salt
        self._hasher = hasher or PasswordHasher()

    def _salted(self, password: str) -> str:
        return password + self._salt

    def hash(self, password: str) -> str:
        """Hash a password for storage.

        Args:
            password: The plaintext password.

        Returns:
            The Argon2id hash of the salted password.

        Raises:
            EmptyCredentialError: If the password is empty.
        """
        if not password:
            raise EmptyCredentialError("Password is empty")
        return self._hasher.hash(self._salted(password))

    def verify(self, stored_hash: str, password: str) -> None:
        """Check a submitted password against a stored hash.

        Emptiness is checked before any hashing work is done.

        Args:
            stored_hash: The hash held by the credential store.
            password: The plaintext password submitted by the caller.

        Raises:
            EmptyCredentialError: If either argument is empty.
            CredentialMismatchError: If the password does not match, or the
                stored hash cannot be parsed.
        """
        if not stored_hash or not password:
            raise EmptyCredentialError("Given password(s) is empty")
        try:
            self._hasher.verify(stored_hash, self._salted(password))
        except (VerificationError, InvalidHashError) as e:
            raise CredentialMismatchError("Password does not match") from e

    @cached_property
    def dummy_hash(self) -> str:
        """Hash of a throwaway password.

        Verifying against it when a username is unknown keeps the response
        time of that path in line with a wrong-password attempt.
        """
        return self.hash("dummy_password_for_timing_safety")

    def burn(self, password: str) -> None:
        """Spend one verification's worth of work and discard the result."""
        try:
            self.verify(self.dummy_hash, password or "-")
        except CredentialMismatchError:
            pass
