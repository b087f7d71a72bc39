# Immutable client configuration.

from datetime import timedelta
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

if TYPE_CHECKING:
    from contentstack_management.settings import Settings

DEFAULT_HOST = "api.contentstack.io"
DEFAULT_PORT = 443
DEFAULT_VERSION = "v3"
DEFAULT_TIMEOUT_SECONDS = 30
# Maximum number of bytes buffered when reading a response body (100 MiB)
CONTENT_BUFFER_SIZE = 100 * 1024 * 1024


class ProxyCredentials(BaseModel):
    """Credentials presented to the configured proxy."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: SecretStr = Field(default=SecretStr(""))


class ContentstackClientOptions(BaseModel):
    """Connection, authentication, retry and proxy parameters of one client.

    Instances are frozen: a client reads them for its whole lifetime, and a
    different configuration requires a new client. Use `with_changes` to derive
    a modified copy.

    Attributes:
        authtoken: Optional authtoken sent with every request that accepts one.
        host: The API host name.
        port: The API port.
        version: The API version path segment.
        disable_logging: Route client logs to a silent sink.
        max_response_content_buffer_size: Maximum number of bytes read from a response body.
        timeout: Timeout of a single attempt. Accepts seconds or a timedelta.
        retry_on_error: Whether transient failures are retried.
        max_attempts: Total number of transport invocations allowed per call.
        retry_delay: Base delay in seconds of the exponential backoff.
        max_retry_delay: Upper bound in seconds of a single backoff wait.
        proxy_host: Proxy host, optionally with a scheme.
        proxy_port: Proxy port, -1 for the scheme default.
        proxy_credentials: Credentials for the proxy.
    """

    model_config = ConfigDict(frozen=True)

    authtoken: Optional[str] = Field(default=None)
    host: str = Field(default=DEFAULT_HOST, min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    version: str = Field(default=DEFAULT_VERSION, min_length=1)
    disable_logging: bool = Field(default=False)
    max_response_content_buffer_size: int = Field(default=CONTENT_BUFFER_SIZE, gt=0)
    timeout: timedelta = Field(default=timedelta(seconds=DEFAULT_TIMEOUT_SECONDS))
    retry_on_error: bool = Field(default=True)
    max_attempts: int = Field(default=5, ge=1)
    retry_delay: float = Field(default=0.3, ge=0)
    max_retry_delay: float = Field(default=30.0, ge=0)
    proxy_host: Optional[str] = Field(default=None)
    proxy_port: int = Field(default=-1)
    proxy_credentials: Optional[ProxyCredentials] = Field(default=None)

    @field_validator("timeout", mode="before")
    @classmethod
    def _timeout_from_seconds(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return timedelta(seconds=value)
        return value

    @field_validator("timeout")
    @classmethod
    def _timeout_positive(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("timeout must be positive")
        return value

    @field_validator("host")
    @classmethod
    def _strip_host(cls, value: str) -> str:
        host = value.strip()
        for scheme in ("https://", "http://"):
            if host.startswith(scheme):
                host = host[len(scheme) :]
        return host.rstrip("/")

    @field_validator("proxy_port")
    @classmethod
    def _valid_proxy_port(cls, value: int) -> int:
        if value != -1 and not 1 <= value <= 65535:
            raise ValueError("proxy_port must be -1 or between 1 and 65535")
        return value

    @property
    def base_url(self) -> str:
        """The API root every service path is resolved against."""
        authority = self.host if self.port == DEFAULT_PORT else f"{self.host}:{self.port}"
        return f"https://{authority}/{self.version.strip('/')}/"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout.total_seconds()

    def get_proxy_url(self) -> Optional[str]:
        """Returns the proxy URL for the transport, or None when no proxy is configured."""
        if not self.proxy_host:
            return None

        scheme, separator, host = self.proxy_host.partition("://")
        if not separator:
            scheme, host = "http", self.proxy_host
        host = host.rstrip("/")

        userinfo = ""
        if self.proxy_credentials is not None:
            username = quote(self.proxy_credentials.username, safe="")
            password = quote(self.proxy_credentials.password.get_secret_value(), safe="")
            userinfo = f"{username}:{password}@" if password else f"{username}@"

        port = f":{self.proxy_port}" if self.proxy_port != -1 else ""
        return f"{scheme}://{userinfo}{host}{port}"

    def with_changes(self, **changes: Any) -> "ContentstackClientOptions":
        """Returns a validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(changes)
        return ContentstackClientOptions.model_validate(data)

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None) -> "ContentstackClientOptions":
        """Builds options from environment variables, keeping defaults for unset ones."""
        if settings is None:
            from contentstack_management.settings import Settings

            settings = Settings()

        values: dict[str, Any] = {
            "authtoken": settings.get_authtoken(),
            "host": settings.get_host(),
            "port": settings.get_port(),
            "version": settings.get_version(),
            "disable_logging": settings.get_disable_logging(),
            "timeout": settings.get_timeout(),
            "retry_on_error": settings.get_retry_on_error(),
            "max_attempts": settings.get_max_attempts(),
            "proxy_host": settings.get_proxy_host(),
            "proxy_port": settings.get_proxy_port(),
        }
        username = settings.get_proxy_username()
        if username:
            values["proxy_credentials"] = ProxyCredentials(
                username=username, password=SecretStr(settings.get_proxy_password() or "")
            )
        return cls(**{key: value for key, value in values.items() if value is not None})
