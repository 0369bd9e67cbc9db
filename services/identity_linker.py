# FILE: services/identity_linker.py
"""
User Identity Linker

Maps a Telegram user id to a web account id.

Token lifecycle:
    Issued -> Redeemed (token deleted)
    Issued -> Expired  (token deleted on next touch)

A token is claimed by deleting it, so a second redemption always
sees INVALID_OR_EXPIRED even under concurrent requests.
"""

import logging
import secrets
import uuid
from datetime import timedelta
from typing import TYPE_CHECKING, Callable, Optional

from config import LINK_TOKEN_TTL_MINUTES
from core.errors import AuthError, UpstreamError
from models.identity import LinkKind, RedeemStatus
from services.dates import utcnow

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger("identity_linker")

CODE_LENGTH = 6


def _new_token(kind: LinkKind) -> str:
    if kind is LinkKind.CODE:
        return uuid.uuid4().hex[:CODE_LENGTH]
    return secrets.token_urlsafe(24)


class IdentityLinker:
    def __init__(
        self,
        db: "Prisma",
        *,
        clock: Callable = utcnow,
        ttl: timedelta = timedelta(minutes=LINK_TOKEN_TTL_MINUTES),
    ):
        self.db = db
        self.clock = clock
        self.ttl = ttl

    async def issue_link_token(self, chat_user_id: str, kind: LinkKind = LinkKind.CODE) -> str:
        now = self.clock()
        token = _new_token(kind)
        try:
            await self.db.linktoken.create(
                data={
                    "token": token,
                    "kind": kind.value,
                    "chat_user_id": chat_user_id,
                    "created_at": now,
                    "expires_at": now + self.ttl,
                }
            )
        except Exception as e:
            logger.exception("[LINK_ISSUE_FAILED] chat_user_id=%s", chat_user_id)
            raise UpstreamError("Unable to create link code.") from e

        logger.info(f"[LINK_ISSUED] chat_user_id={chat_user_id}, kind={kind.value}")
        return token

    async def redeem_link_token(
        self, token: str, account_id: str, kind: LinkKind = LinkKind.CODE
    ) -> RedeemStatus:
        try:
            record = await self.db.linktoken.find_unique(where={"token": token})
            if record is None:
                return RedeemStatus.INVALID_OR_EXPIRED

            # Expired rows are removed on any lookup, whatever kind was asked for
            if self.clock() > record.expires_at:
                await self.db.linktoken.delete(where={"token": token})
                logger.info(f"[LINK_EXPIRED] chat_user_id={record.chat_user_id}")
                if record.kind != kind.value:
                    return RedeemStatus.INVALID_OR_EXPIRED
                return RedeemStatus.EXPIRED

            if record.kind != kind.value:
                return RedeemStatus.INVALID_OR_EXPIRED

            # Claim: only one caller can delete the row
            claimed = await self.db.linktoken.delete(where={"token": token})
            if claimed is None:
                return RedeemStatus.INVALID_OR_EXPIRED

            await self.db.usermapping.upsert(
                where={"chat_user_id": claimed.chat_user_id},
                data={
                    "create": {
                        "chat_user_id": claimed.chat_user_id,
                        "account_id": account_id,
                        "linked": True,
                    },
                    "update": {"account_id": account_id, "linked": True},
                },
            )
        except Exception as e:
            logger.exception("[LINK_REDEEM_FAILED] kind=%s", kind.value)
            raise UpstreamError("Unable to verify link code.") from e

        logger.info(
            f"[LINK_REDEEMED] chat_user_id={claimed.chat_user_id}, account_id={account_id}"
        )
        return RedeemStatus.SUCCESS

    async def resolve_account_id(self, chat_user_id: str) -> Optional[str]:
        try:
            mapping = await self.db.usermapping.find_unique(where={"chat_user_id": chat_user_id})
        except Exception as e:
            logger.exception("[LINK_LOOKUP_FAILED] chat_user_id=%s", chat_user_id)
            raise UpstreamError("Unable to look up linked account.") from e

        if mapping is None or not mapping.linked:
            return None
        return mapping.account_id

    async def require_account_id(self, chat_user_id: Optional[str]) -> str:
        account_id = await self.resolve_account_id(chat_user_id) if chat_user_id else None
        if not account_id:
            raise AuthError("No mapping found for Telegram user ID", status_code=404)
        return account_id
