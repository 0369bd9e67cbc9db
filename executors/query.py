import logging
from typing import Callable

from core.errors import UpstreamError, ValidationError
from executors import replies
from executors.base import BaseExecutor
from models.telegram import Reply, TelegramMessage
from services.dates import get_today
from services.expense_store import sum_amounts
from services.expense_validator import validate_query

logger = logging.getLogger("query_executor")


class QueryExecutor(BaseExecutor):
    """
    Executes "query" intents: resolve owner -> extract range -> validate -> sum.
    """

    def __init__(self, engine, store, linker, *, today: Callable = get_today):
        self.engine = engine
        self.store = store
        self.linker = linker
        self.today = today

    async def execute(self, message: TelegramMessage) -> Reply:
        account_id = (
            await self.linker.resolve_account_id(message.chat_user_id)
            if message.chat_user_id
            else None
        )
        if not account_id:
            logger.info(f"[QUERY_UNLINKED] chat_user_id={message.chat_user_id}")
            return Reply(replies.LINK_ACCOUNT)

        today = self.today()
        try:
            candidate = await self.engine.extract_query(message.text or "", today)
        except UpstreamError:
            candidate = None
        if candidate is None:
            return Reply(replies.QUERY_CLARIFY)

        try:
            query = validate_query(candidate, today)
        except ValidationError as e:
            logger.info(f"[QUERY_REJECTED] chat_user_id={message.chat_user_id}, fields={e.fields}")
            return Reply(replies.QUERY_CLARIFY)

        try:
            expenses = await self.store.get(
                account_id, query.start_date, query.end_date, query.category
            )
        except UpstreamError:
            return Reply(replies.QUERY_FAILED)

        total = sum_amounts(expenses)
        logger.info(
            f"[QUERY_ANSWERED] account_id={account_id}, count={len(expenses)}, total={total:.2f}"
        )
        return Reply(replies.spending_total(query, total))
