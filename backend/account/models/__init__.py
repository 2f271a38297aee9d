from account.models.user import UserModel

__all__ = [
    "UserModel",
]
