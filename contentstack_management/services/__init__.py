from contentstack_management.services.contentstack_service import AUTHTOKEN_HEADER, ContentstackService
from contentstack_management.services.user.get_logged_in_user_service import GetLoggedInUserService
from contentstack_management.services.user.login_service import LoginCredentials, LoginService
from contentstack_management.services.user.logout_service import LogoutService

__all__ = [
    "AUTHTOKEN_HEADER",
    "ContentstackService",
    "GetLoggedInUserService",
    "LoginCredentials",
    "LoginService",
    "LogoutService",
]
