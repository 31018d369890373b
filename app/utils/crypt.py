import os
import base64
import json

from cryptography.hazmat.primitives.ciphers.aead import AESGCM


def _key():
    # Read per call so the key can be provided after import (workers, tests).
    key_passphrase = os.getenv("SECRET_KEY")
    if not key_passphrase:
        raise ValueError("SECRET_KEY is not set in the environment!")
    return key_passphrase.encode()[:32].ljust(32, b"\0")


def encrypt_data(data):
    aesgcm = AESGCM(_key())
    nonce = os.urandom(12)  # 96-bit GCM nonce
    encrypted = aesgcm.encrypt(nonce, json.dumps(data).encode(), None)
    return base64.b64encode(nonce + encrypted).decode()


def decrypt_data(encrypted_data):
    raw = base64.b64decode(encrypted_data)
    nonce, ciphertext = raw[:12], raw[12:]
    decrypted = AESGCM(_key()).decrypt(nonce, ciphertext, None)
    return json.loads(decrypted.decode())
