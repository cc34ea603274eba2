"""AES-256-CBC envelope shared with the external billing endpoint.

Key and IV are derived from two shared secrets: key = SHA-256(key secret),
IV = first 16 bytes of SHA-256(IV secret). Ciphertext travels as base64.
The derivation must stay byte-compatible with the billing side.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import json
from typing import Any

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from checkout_admin.config import settings


class EnvelopeError(ValueError):
    pass


class Envelope:
    def __init__(self, key_secret: str, iv_secret: str) -> None:
        self._key = hashlib.sha256(key_secret.encode("utf-8")).digest()
        self._iv = hashlib.sha256(iv_secret.encode("utf-8")).digest()[:16]

    @classmethod
    def from_settings(cls) -> Envelope:
        return cls(settings.billing_secret_key, settings.billing_secret_iv)

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(self._iv))

    def encrypt(self, plaintext: str) -> str:
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        data = padder.update(plaintext.encode("utf-8")) + padder.finalize()
        encryptor = self._cipher().encryptor()
        ciphertext = encryptor.update(data) + encryptor.finalize()
        return base64.b64encode(ciphertext).decode("ascii")

    def decrypt(self, token: str) -> str:
        try:
            ciphertext = base64.b64decode(token.strip(), validate=True)
            decryptor = self._cipher().decryptor()
            data = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plaintext = unpadder.update(data) + unpadder.finalize()
            return plaintext.decode("utf-8")
        except (binascii.Error, ValueError) as exc:
            raise EnvelopeError("Could not decrypt billing payload") from exc

    def seal(self, payload: dict[str, Any]) -> str:
        return self.encrypt(json.dumps(payload, separators=(",", ":")))

    def open(self, token: str) -> dict[str, Any]:
        text = self.decrypt(token)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise EnvelopeError("Billing payload is not JSON") from exc
        if not isinstance(data, dict):
            raise EnvelopeError("Billing payload is not a JSON object")
        return data
