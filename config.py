import os
import keyring
from keyring.errors import KeyringError
from pathlib import Path


class CLIConfig:
    """Configuration management for vaultkv CLI"""

    SERVICE_NAME = 'vaultkv'
    TOKEN_KEY = 'token'
    ADDRESS_KEY = 'address'

    DEFAULT_ADDRESS = 'http://127.0.0.1:8200'
    CONFIG_FILE = Path.home() / '.vaultkv' / 'config'

    @classmethod
    def get_token(cls) -> str:
        """Get token from VAULT_TOKEN or the keychain"""
        env_token = os.environ.get('VAULT_TOKEN')
        if env_token:
            return env_token
        try:
            return keyring.get_password(cls.SERVICE_NAME, cls.TOKEN_KEY)
        except KeyringError:
            return None

    @classmethod
    def set_token(cls, token: str):
        """Store token in keychain"""
        try:
            keyring.set_password(cls.SERVICE_NAME, cls.TOKEN_KEY, token)
        except KeyringError as e:
            raise RuntimeError(f"Failed to store token in keychain: {str(e)}")

    @classmethod
    def delete_token(cls):
        """Delete token from keychain"""
        try:
            keyring.delete_password(cls.SERVICE_NAME, cls.TOKEN_KEY)
        except KeyringError:
            # nothing stored
            pass

    @classmethod
    def get_address(cls) -> str:
        """Get Vault address from environment or config"""
        # Check environment variable first
        env_addr = os.environ.get('VAULT_ADDR')
        if env_addr:
            return env_addr

        # Check config file
        value = cls._get_config_value(cls.ADDRESS_KEY)
        return value if value else cls.DEFAULT_ADDRESS

    @classmethod
    def set_address(cls, address: str):
        """Store Vault address in config file"""
        cls._set_config_value(cls.ADDRESS_KEY, address)

    @classmethod
    def _get_config_value(cls, key: str) -> str:
        """Get a value from config file"""
        if cls.CONFIG_FILE.exists():
            with open(cls.CONFIG_FILE, 'r') as f:
                for line in f:
                    if line.startswith(f'{key}='):
                        return line.split('=', 1)[1].strip()
        return None

    @classmethod
    def _set_config_value(cls, key: str, value: str):
        """Set a value in config file"""
        cls.CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

        # Read existing config
        lines = []
        if cls.CONFIG_FILE.exists():
            with open(cls.CONFIG_FILE, 'r') as f:
                lines = [line for line in f if not line.startswith(f'{key}=')]

        lines.append(f'{key}={value}\n')

        with open(cls.CONFIG_FILE, 'w') as f:
            f.writelines(lines)

    @classmethod
    def is_authenticated(cls) -> bool:
        """Check if a token is available"""
        return cls.get_token() is not None
