"""
SSH key store for gitresource.

Writes the source's private key, and the public key derived from it,
into an explicit directory. Provisioning is idempotent: a directory
that already holds id_rsa is treated as initialized and left alone.
"""

import os
import subprocess
import tempfile
from pathlib import Path
from typing import Optional
import logging

from ..exit_codes import KeyProvisioningError

logger = logging.getLogger(__name__)

PRIVATE_KEY_NAME = "id_rsa"
PUBLIC_KEY_NAME = "id_rsa.pub"


class KeyStore:
    """
    Idempotent SSH key pair provisioning.

    Example:
        store = KeyStore(Path("/root/.ssh"))
        store.provision(source.private_key)
    """

    def __init__(self, directory: Path, timeout: int = 30):
        """
        Initialize KeyStore.

        Args:
            directory: Directory to write id_rsa and id_rsa.pub into
            timeout: Seconds to allow ssh-keygen to run
        """
        self.directory = Path(directory).expanduser()
        self.timeout = timeout

    @property
    def private_key_path(self) -> Path:
        return self.directory / PRIVATE_KEY_NAME

    @property
    def public_key_path(self) -> Path:
        return self.directory / PUBLIC_KEY_NAME

    def is_provisioned(self) -> bool:
        return self.private_key_path.exists()

    def provision(self, private_key: Optional[str]) -> bool:
        """
        Write the key pair unless it is already present.

        id_rsa is moved into place last, so a failed attempt leaves the
        directory unprovisioned and the next call tries again.

        Args:
            private_key: PEM/OpenSSH private key material

        Returns:
            True if keys were written, False if skipped

        Raises:
            KeyProvisioningError: if the files cannot be written or
                the public key cannot be derived
        """
        if self.is_provisioned():
            logger.debug(f"SSH key already present in {self.directory}")
            return False
        if not private_key:
            logger.debug("No private key configured, skipping key provisioning")
            return False

        material = private_key if private_key.endswith('\n') else private_key + '\n'
        try:
            self.directory.mkdir(mode=0o700, parents=True, exist_ok=True)
            staged = self._stage(self.private_key_path, material, 0o600)
        except OSError as e:
            raise KeyProvisioningError(f"cannot write private key to {self.directory}: {e}")

        try:
            public_key = self._derive_public_key(staged)
            self._write(self.public_key_path, public_key, 0o644)
            os.replace(staged, self.private_key_path)
        except OSError as e:
            raise KeyProvisioningError(f"cannot write key pair to {self.directory}: {e}")
        finally:
            if staged.exists():
                staged.unlink()

        logger.info(f"Provisioned SSH key pair in {self.directory}")
        return True

    def _derive_public_key(self, private_key_path: Path) -> str:
        cmd = ['ssh-keygen', '-y', '-f', str(private_key_path)]
        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise KeyProvisioningError(f"ssh-keygen could not be run: {e}")

        if result.returncode != 0:
            raise KeyProvisioningError(
                f"ssh-keygen failed to derive public key: {(result.stderr or '').strip()}"
            )
        return result.stdout

    def _stage(self, path: Path, content: str, mode: int) -> Path:
        """Write content to a temp file beside path with the given permissions."""
        fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w') as f:
                f.write(content)
            os.chmod(temp_path, mode)
        except Exception:
            os.unlink(temp_path)
            raise
        return Path(temp_path)

    def _write(self, path: Path, content: str, mode: int) -> None:
        """Write content atomically with the given permissions."""
        staged = self._stage(path, content, mode)
        try:
            os.replace(staged, path)
        except Exception:
            staged.unlink()
            raise
