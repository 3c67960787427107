from .auth import AuthClient
from .finance import FinanceClient
from .users import UsersClient

__all__ = [
    "AuthClient",
    "FinanceClient",
    "UsersClient",
]
