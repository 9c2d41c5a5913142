from .service import ACCOUNT_GROUPS, AccountService

__all__ = ["AccountService", "ACCOUNT_GROUPS"]
