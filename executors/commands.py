import logging
from typing import Any, Dict

from core.errors import NotFoundError, UpstreamError, ValidationError
from executors import replies
from executors.base import BaseExecutor
from models.identity import LinkKind
from models.telegram import Reply, TelegramMessage
from services.expense_validator import validate_expense

logger = logging.getLogger("command_executor")


def parse_add_expense_args(args: str) -> Dict[str, Any]:
    """
    "/addexpense Lunch, 12.50, Food, 2024-05-01" → candidate expense dict.
    The amount stays a string when it isn't numeric so the validator reports it.
    """
    parts = [p.strip() for p in args.split(",")]
    description, amount, category = parts[0], parts[1], parts[2]
    candidate: Dict[str, Any] = {"description": description, "category": category}
    try:
        candidate["amount"] = float(amount)
    except ValueError:
        candidate["amount"] = amount
    if len(parts) > 3 and parts[3]:
        candidate["date"] = parts[3]
    return candidate


class CommandExecutor(BaseExecutor):
    """
    Slash commands. Each command maps to one handler; unknown commands get /help.
    """

    def __init__(self, store, linker, *, app_url: str):
        self.store = store
        self.linker = linker
        self.app_url = app_url
        self.handlers = {
            "/start": self._start,
            "/link": self._link,
            "/help": self._help,
            "/addexpense": self._add_expense,
            "/viewexpenses": self._view_expenses,
            "/deleteexpense": self._delete_expense,
        }

    async def execute(self, message: TelegramMessage) -> Reply:
        handler = self.handlers.get(message.command, self._help)
        logger.info(f"[COMMAND] command={message.command}, chat_user_id={message.chat_user_id}")
        return await handler(message)

    async def _start(self, message: TelegramMessage) -> Reply:
        code = await self.linker.issue_link_token(message.chat_user_id, LinkKind.CODE)
        return Reply(replies.link_code(code, self.app_url), parse_mode="Markdown")

    async def _link(self, message: TelegramMessage) -> Reply:
        token = await self.linker.issue_link_token(message.chat_user_id, LinkKind.TOKEN)
        return Reply(replies.link_token(token, self.app_url))

    async def _help(self, message: TelegramMessage) -> Reply:
        return Reply(replies.HELP)

    async def _add_expense(self, message: TelegramMessage) -> Reply:
        args = message.command_args
        if args.count(",") < 2:
            return Reply(replies.ADD_EXPENSE_USAGE)

        try:
            expense = validate_expense(parse_add_expense_args(args))
        except ValidationError as e:
            details = "; ".join(err["message"] for err in e.errors)
            return Reply(f"Couldn't add that expense: {details}.")

        account_id = await self.linker.resolve_account_id(message.chat_user_id)
        if not account_id:
            return Reply(replies.LINK_ACCOUNT)

        try:
            created = await self.store.create(expense, account_id)
        except UpstreamError:
            return Reply(replies.LOG_FAILED)
        return Reply(replies.expense_added(created))

    async def _view_expenses(self, message: TelegramMessage) -> Reply:
        account_id = await self.linker.resolve_account_id(message.chat_user_id)
        if not account_id:
            return Reply(replies.LINK_ACCOUNT)

        try:
            expenses = await self.store.get(account_id)
        except UpstreamError:
            return Reply(replies.QUERY_FAILED)

        if not expenses:
            return Reply(replies.NO_EXPENSES)
        return Reply(replies.expense_list(expenses))

    async def _delete_expense(self, message: TelegramMessage) -> Reply:
        expense_id = message.command_args
        if not expense_id:
            return Reply(replies.DELETE_EXPENSE_USAGE)

        account_id = await self.linker.resolve_account_id(message.chat_user_id)
        if not account_id:
            return Reply(replies.LINK_ACCOUNT)

        try:
            existing = await self.store.get_by_id(expense_id)
            # Someone else's expense looks exactly like a missing one
            if existing is None or existing.owner_id != account_id:
                return Reply(replies.EXPENSE_NOT_FOUND)
            await self.store.delete(expense_id)
        except NotFoundError:
            return Reply(replies.EXPENSE_NOT_FOUND)
        except UpstreamError:
            return Reply(replies.DELETE_FAILED)
        return Reply(replies.expense_deleted(expense_id))
