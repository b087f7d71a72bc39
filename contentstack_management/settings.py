import os
from typing import Optional

from dotenv import load_dotenv

# Load .env file variables into environment
load_dotenv(verbose=True)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Settings:
    """Client configuration values loaded from environment variables.

    Every getter returns None when its variable is unset, so that the
    defaults of ContentstackClientOptions apply.
    """

    # --- Helper Methods using os.getenv ---
    def _get_int(self, name: str) -> Optional[int]:
        value = os.getenv(name)
        if value is None or value == "":
            return None
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{name} environment variable must be an integer.")

    def _get_float(self, name: str) -> Optional[float]:
        value = os.getenv(name)
        if value is None or value == "":
            return None
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"{name} environment variable must be a number.")

    def _get_bool(self, name: str) -> Optional[bool]:
        value = os.getenv(name)
        if value is None or value == "":
            return None
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"{name} environment variable must be a boolean (true/false).")

    # --- Connection Settings ---
    def get_authtoken(self) -> Optional[str]:
        """Returns the management authtoken, if set."""
        return os.getenv("CONTENTSTACK_AUTHTOKEN")

    def get_host(self) -> Optional[str]:
        return os.getenv("CONTENTSTACK_HOST")

    def get_port(self) -> Optional[int]:
        """Returns the API port as an integer, or None if not set."""
        return self._get_int("CONTENTSTACK_PORT")

    def get_version(self) -> Optional[str]:
        return os.getenv("CONTENTSTACK_VERSION")

    def get_timeout(self) -> Optional[float]:
        """Returns the per-attempt timeout in seconds, or None if not set."""
        return self._get_float("CONTENTSTACK_TIMEOUT")

    # --- Behaviour Settings ---
    def get_disable_logging(self) -> Optional[bool]:
        return self._get_bool("CONTENTSTACK_DISABLE_LOGGING")

    def get_retry_on_error(self) -> Optional[bool]:
        return self._get_bool("CONTENTSTACK_RETRY_ON_ERROR")

    def get_max_attempts(self) -> Optional[int]:
        return self._get_int("CONTENTSTACK_MAX_ATTEMPTS")

    # --- Proxy Settings ---
    def get_proxy_host(self) -> Optional[str]:
        return os.getenv("CONTENTSTACK_PROXY_HOST")

    def get_proxy_port(self) -> Optional[int]:
        return self._get_int("CONTENTSTACK_PROXY_PORT")

    def get_proxy_username(self) -> Optional[str]:
        return os.getenv("CONTENTSTACK_PROXY_USERNAME")

    def get_proxy_password(self) -> Optional[str]:
        return os.getenv("CONTENTSTACK_PROXY_PASSWORD")
