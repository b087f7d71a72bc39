from contentstack_management.models.user import User

__all__ = ["User"]
