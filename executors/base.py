from abc import ABC, abstractmethod

from models.telegram import Reply, TelegramMessage


class BaseExecutor(ABC):
    """
    Base contract for all executors.
    Executors take one inbound chat message and return exactly one Reply.
    No routing here; the dispatcher picks the executor.
    """

    @abstractmethod
    async def execute(self, message: TelegramMessage) -> Reply:
        pass
