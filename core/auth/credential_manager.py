"""Credential manager for the provider API key."""

import logging
from typing import Optional
from pathlib import Path
import json

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "shotsolve"


class CredentialManager:
    """Stores the provider API key in the system keyring.

    With ``use_keyring=False`` the key is kept in a JSON file readable
    only by the owner instead.
    """

    SERVICE_NAME = "shotsolve"
    API_KEY = "openai_api_key"

    def __init__(self, use_keyring: bool = True, config_dir: Optional[Path] = None):
        """Initialize credential manager.

        Args:
            use_keyring: Whether to use system keyring (default: True)
            config_dir: Directory for the fallback credentials file
        """
        self.keyring_available = use_keyring
        self.credentials = {}
        self.credentials_file = None

        if use_keyring:
            logger.debug("Using system keyring for credential storage")
        else:
            logger.info("Keyring disabled, using file storage")
            self._init_fallback_storage(Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR)

    def _init_fallback_storage(self, config_dir: Path):
        """Initialize fallback credential storage (JSON file)."""
        config_dir.mkdir(parents=True, exist_ok=True)

        self.credentials_file = config_dir / ".credentials.json"

        if self.credentials_file.exists():
            try:
                with open(self.credentials_file, 'r') as f:
                    self.credentials = json.load(f)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load credentials: {e}")
                self.credentials = {}

    def _save_fallback_credentials(self):
        """Save credentials to fallback file."""
        with open(self.credentials_file, 'w') as f:
            json.dump(self.credentials, f, indent=2)
        # Owner read/write only
        self.credentials_file.chmod(0o600)

    def set_api_key(self, api_key: str) -> bool:
        """Store the provider API key.

        Args:
            api_key: Key to store (surrounding whitespace is removed)

        Returns:
            True if successful
        """
        api_key = api_key.strip()

        if self.keyring_available:
            try:
                keyring.set_password(self.SERVICE_NAME, self.API_KEY, api_key)
            except KeyringError as e:
                logger.error(f"Failed to store API key: {e}")
                return False
        else:
            self.credentials[self.API_KEY] = api_key
            try:
                self._save_fallback_credentials()
            except OSError as e:
                logger.error(f"Failed to save credentials: {e}")
                return False

        logger.info("API key stored")
        return True

    def get_api_key(self) -> Optional[str]:
        """Get the stored API key.

        Returns:
            API key or None
        """
        if self.keyring_available:
            try:
                return keyring.get_password(self.SERVICE_NAME, self.API_KEY)
            except KeyringError as e:
                logger.error(f"Failed to read API key: {e}")
                return None
        return self.credentials.get(self.API_KEY)

    def has_api_key(self) -> bool:
        """Check whether a usable (non-blank) API key is stored."""
        key = self.get_api_key()
        return bool(key and key.strip())

    def delete_api_key(self) -> bool:
        """Delete the stored API key.

        Returns:
            True if successful
        """
        if self.keyring_available:
            try:
                keyring.delete_password(self.SERVICE_NAME, self.API_KEY)
            except PasswordDeleteError:
                # Nothing stored
                logger.debug("No API key to delete")
            except KeyringError as e:
                logger.error(f"Failed to delete API key: {e}")
                return False
        else:
            self.credentials.pop(self.API_KEY, None)
            try:
                self._save_fallback_credentials()
            except OSError as e:
                logger.error(f"Failed to save credentials: {e}")
                return False

        logger.info("API key deleted")
        return True
