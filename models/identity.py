# models/identity.py
from enum import Enum


class LinkKind(str, Enum):
    # Short code shown in chat, typed into the web app
    CODE = "code"
    # Long token carried in a web link opened from chat
    TOKEN = "token"


class RedeemStatus(str, Enum):
    SUCCESS = "success"
    INVALID_OR_EXPIRED = "invalid_or_expired"
    EXPIRED = "expired"

    @property
    def message(self) -> str:
        return {
            RedeemStatus.SUCCESS: "Account linked",
            RedeemStatus.INVALID_OR_EXPIRED: "Invalid or expired code",
            RedeemStatus.EXPIRED: "Code expired",
        }[self]
