import logging

from core.errors import UpstreamError, ValidationError
from executors import replies
from executors.base import BaseExecutor
from models.telegram import Reply, TelegramMessage
from services.expense_validator import validate_expense

logger = logging.getLogger("log_executor")


class LogExecutor(BaseExecutor):
    """
    Executes "log" intents: extract -> validate -> resolve owner -> create.
    Identity is resolved on the write path, after validation.
    """

    def __init__(self, engine, store, linker, transport):
        self.engine = engine
        self.store = store
        self.linker = linker
        self.transport = transport

    async def execute(self, message: TelegramMessage) -> Reply:
        if message.photo_file_id:
            try:
                image = await self.transport.download_photo(message.photo_file_id)
            except UpstreamError:
                return Reply(replies.PHOTO_FETCH_FAILED)
            extract = self.engine.extract_expense(image=image)
        else:
            extract = self.engine.extract_expense(text=message.text)

        try:
            candidate = await extract
        except UpstreamError:
            # Model failures become a clarifying question, not an error reply
            candidate = None

        if candidate is None:
            return Reply(replies.need_more_details())

        try:
            expense = validate_expense(candidate)
        except ValidationError as e:
            logger.info(f"[LOG_REJECTED] chat_user_id={message.chat_user_id}, fields={e.fields}")
            return Reply(replies.need_more_details(e.fields))

        if not expense.description:
            return Reply(replies.need_more_details(["description"]))

        account_id = (
            await self.linker.resolve_account_id(message.chat_user_id)
            if message.chat_user_id
            else None
        )
        if not account_id:
            return Reply(replies.LINK_ACCOUNT)

        try:
            created = await self.store.create(expense, account_id)
        except UpstreamError:
            return Reply(replies.LOG_FAILED)

        return Reply(replies.expense_logged(created))
