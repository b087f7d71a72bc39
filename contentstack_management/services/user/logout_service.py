from contentstack_management.services.contentstack_service import AUTHTOKEN_HEADER, ContentstackService


class LogoutService(ContentstackService):
    """Ends the session of the given authtoken (DELETE user-session)."""

    def __init__(self, authtoken: str):
        if not authtoken:
            raise ValueError("An authtoken is required to log out")
        super().__init__(
            http_method="DELETE",
            resource_path="user-session",
            headers={AUTHTOKEN_HEADER: authtoken},
        )
