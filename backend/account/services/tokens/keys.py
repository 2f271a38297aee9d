"""Signing keys for identity (RSA) and refresh (HMAC) tokens."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey


class KeyMaterialError(ValueError):
    """Raised when key material is missing or malformed."""


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode() if isinstance(value, str) else value


@dataclass(frozen=True, slots=True)
class KeyMaterial:
    """
    Validated, immutable key set owned by a token service.

    Build it with :meth:`from_pem` or :meth:`from_files`; swapping keys means
    building a new instance (and a new service).

    :ivar private_key: Signs identity tokens.
    :ivar public_key: Verifies identity tokens.
    :ivar refresh_secret: Signs and verifies refresh tokens.
    """

    private_key: RSAPrivateKey
    public_key: RSAPublicKey
    refresh_secret: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.private_key, RSAPrivateKey):
            raise KeyMaterialError("Identity signing key must be an RSA private key")
        if not isinstance(self.public_key, RSAPublicKey):
            raise KeyMaterialError("Identity verification key must be an RSA public key")
        if self.private_key.public_key().public_numbers() != self.public_key.public_numbers():
            raise KeyMaterialError("Public key does not match the private key")
        if not self.refresh_secret:
            raise KeyMaterialError("Refresh secret cannot be empty")

    @classmethod
    def from_pem(
        cls,
        private_pem: str | bytes,
        public_pem: str | bytes,
        refresh_secret: str | bytes,
    ) -> KeyMaterial:
        """
        Parse PEM-encoded RSA keys.

        :param private_pem: PKCS#1 or PKCS#8 private key (unencrypted).
        :param public_pem: SubjectPublicKeyInfo or PKCS#1 public key.
        :param refresh_secret: Shared HMAC secret.
        :raises KeyMaterialError: If any part cannot be used.
        """
        try:
            private_key = serialization.load_pem_private_key(_as_bytes(private_pem), password=None)
        except (TypeError, ValueError, UnsupportedAlgorithm) as exc:
            raise KeyMaterialError(f"Could not parse private key: {exc}") from exc
        try:
            public_key = serialization.load_pem_public_key(_as_bytes(public_pem))
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise KeyMaterialError(f"Could not parse public key: {exc}") from exc

        return cls(
            private_key=private_key,  # type: ignore[arg-type]
            public_key=public_key,  # type: ignore[arg-type]
            refresh_secret=_as_bytes(refresh_secret),
        )

    @classmethod
    def from_files(
        cls,
        private_path: str | Path,
        public_path: str | Path,
        refresh_secret: str | bytes,
    ) -> KeyMaterial:
        """Read both PEM files and delegate to :meth:`from_pem`."""
        try:
            private_pem = Path(private_path).read_bytes()
            public_pem = Path(public_path).read_bytes()
        except OSError as exc:
            raise KeyMaterialError(f"Could not read key file: {exc}") from exc
        return cls.from_pem(private_pem, public_pem, refresh_secret)
