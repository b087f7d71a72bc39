from typing import Optional

from pydantic import BaseModel, SecretStr

from contentstack_management.core.serialization import ContentstackSerializer
from contentstack_management.services.contentstack_service import ContentstackService


class LoginCredentials(BaseModel):
    """Email and password of a Contentstack account."""

    email: str
    password: SecretStr


class LoginService(ContentstackService):
    """Signs in to a Contentstack account (POST user-session)."""

    def __init__(
        self,
        serializer: ContentstackSerializer,
        credentials: LoginCredentials,
        tfa_token: Optional[str] = None,
    ):
        if credentials is None:
            raise ValueError("Login credentials are required")
        payload = {
            "user": {
                "email": credentials.email,
                "password": credentials.password.get_secret_value(),
                "tfa_token": tfa_token,
            }
        }
        super().__init__(
            http_method="POST",
            resource_path="user-session",
            headers={"Content-Type": "application/json"},
            content=serializer.dumps_bytes(payload),
            use_authtoken=False,
        )
