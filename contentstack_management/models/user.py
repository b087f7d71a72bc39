from typing import TYPE_CHECKING, Optional

from contentstack_management.core.response import ContentstackResponse
from contentstack_management.services.user.get_logged_in_user_service import GetLoggedInUserService
from contentstack_management.services.user.login_service import LoginCredentials, LoginService
from contentstack_management.services.user.logout_service import LogoutService

if TYPE_CHECKING:
    from contentstack_management.contentstack_client import ContentstackClient


class User:
    """User session calls: sign in, sign out and fetch the signed-in user.

    Signing in does not change the client it was made with; build a new client
    with the returned authtoken to make authenticated calls.
    """

    def __init__(self, client: "ContentstackClient"):
        self.client = client

    def login(self, credentials: LoginCredentials, tfa_token: Optional[str] = None) -> ContentstackResponse:
        service = LoginService(self.client.serializer, credentials, tfa_token)
        return self.client.invoke_sync(service)

    async def login_async(
        self, credentials: LoginCredentials, tfa_token: Optional[str] = None
    ) -> ContentstackResponse:
        service = LoginService(self.client.serializer, credentials, tfa_token)
        return await self.client.invoke_async(service)

    def _logout_service(self, authtoken: Optional[str]) -> LogoutService:
        return LogoutService(authtoken or self.client.options.authtoken or "")

    def logout(self, authtoken: Optional[str] = None) -> ContentstackResponse:
        """Ends the session of authtoken, defaulting to the client's authtoken."""
        return self.client.invoke_sync(self._logout_service(authtoken))

    async def logout_async(self, authtoken: Optional[str] = None) -> ContentstackResponse:
        return await self.client.invoke_async(self._logout_service(authtoken))

    def get_user(self) -> ContentstackResponse:
        return self.client.invoke_sync(GetLoggedInUserService())

    async def get_user_async(self) -> ContentstackResponse:
        return await self.client.invoke_async(GetLoggedInUserService())
