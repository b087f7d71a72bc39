from contentstack_management.services.contentstack_service import ContentstackService


class GetLoggedInUserService(ContentstackService):
    """Fetches the user owning the client's authtoken (GET user)."""

    def __init__(self):
        super().__init__(http_method="GET", resource_path="user")
