# core/intent.py
from enum import Enum


class Intent(str, Enum):
    """
    What the user wants from a chat message.
    Exactly two variants; the dispatcher keys its executor table on these.
    """

    LOG = "log"
    QUERY = "query"
