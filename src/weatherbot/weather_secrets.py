import hashlib
import logging
import os
import sqlite3
import subprocess
import sys
import uuid
from os import urandom
from pathlib import Path
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from .errors import ConfigurationError
from .settings import CACHE_DIR

logger = logging.getLogger(__name__)

NONCE_SIZE = 12


class SecretCipher:
    """ChaCha20-Poly1305 with a random nonce prepended to each value."""

    def __init__(self, key: bytes):
        self.key = key

    def encrypt(self, data) -> bytes:
        if isinstance(data, str):
            data = data.encode()
        nonce = urandom(NONCE_SIZE)
        return nonce + ChaCha20Poly1305(self.key).encrypt(nonce, data, None)

    def decrypt(self, data: bytes) -> Optional[str]:
        nonce, ciphertext = data[:NONCE_SIZE], data[NONCE_SIZE:]
        try:
            return ChaCha20Poly1305(self.key).decrypt(nonce, ciphertext, None).decode()
        except InvalidTag:
            # stored with a different machine key
            logger.warning("Could not decrypt a stored secret")
            return None


def get_machine_id():
    if os.name == "nt":
        output = subprocess.check_output("wmic csproduct get UUID", shell=True)
        return output.decode().split("\n")[1].strip()
    elif os.path.exists("/etc/machine-id"):
        return open("/etc/machine-id").read().strip()
    elif os.path.exists("/proc/sys/kernel/random/boot_id"):
        return open("/proc/sys/kernel/random/boot_id").read().strip()
    elif sys.platform == "darwin":
        output = subprocess.check_output(["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"])
        for line in output.decode().split("\n"):
            if "IOPlatformUUID" in line:
                return line.split("=")[-1].strip().replace("\"", "")
    else:
        # containers without a machine id get a stable random one
        fallback = Path(CACHE_DIR).expanduser() / "machine-id"
        if not fallback.exists():
            fallback.parent.mkdir(parents=True, exist_ok=True)
            fallback.write_text(str(uuid.uuid4()))
        return fallback.read_text().strip()


def generate_key() -> bytes:
    """Derive the 32 byte secrets key from machine specific data."""
    machine_id = get_machine_id()
    if not machine_id:
        raise ConfigurationError("Could not determine machine ID")
    return hashlib.sha256(machine_id.encode()).digest()


class SecretManager:
    """Encrypted credential store with environment variable fallback.

    API keys (QWeather, Tavily, model providers) are read from here so none
    of them live in source code.
    """

    def __init__(self, db_path="weatherbot.db", cache_dir=CACHE_DIR, key=None):
        self.cache_dir = Path(cache_dir).expanduser()
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = self.cache_dir / db_path
        self.cipher = SecretCipher(key)

    def _get_connection(self):
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS secrets (name TEXT PRIMARY KEY, value BLOB)"
        )
        conn.commit()
        return conn, cursor

    def set_secret(self, name, value):
        conn, cursor = self._get_connection()
        try:
            cursor.execute(
                "INSERT OR REPLACE INTO secrets (name, value) VALUES (?, ?)",
                (name, self.cipher.encrypt(value)),
            )
            conn.commit()
        finally:
            conn.close()

    def get_secret(self, name, default_value: Optional[str] = None) -> Optional[str]:
        conn, cursor = self._get_connection()
        try:
            cursor.execute("SELECT value FROM secrets WHERE name=?", (name,))
            result = cursor.fetchone()
        finally:
            conn.close()
        if result:
            return self.cipher.decrypt(result[0])
        return os.environ.get(name) or default_value

    def get_required_secret(self, name) -> str:
        val = self.get_secret(name)
        if not val:
            raise ConfigurationError(
                f"Secret '{name}' is not set. "
                f"You can set it using:\n"
                f"1. Environment variable: export {name}=your_value\n"
                f"2. weatherbot secrets set {name}=your_value"
            )
        return val

    def get_all_secrets(self) -> list[tuple[str, str]]:
        return [(name, self.get_secret(name)) for name in self.list_secrets()]

    def list_secrets(self):
        conn, cursor = self._get_connection()
        try:
            cursor.execute("SELECT name FROM secrets")
            return [row[0] for row in cursor.fetchall()]
        finally:
            conn.close()

    def delete_secret(self, name):
        conn, cursor = self._get_connection()
        try:
            cursor.execute("DELETE FROM secrets WHERE name=?", (name,))
            conn.commit()
        finally:
            conn.close()


weather_secrets = SecretManager(key=generate_key())
