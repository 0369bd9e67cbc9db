# executors/replies.py
"""User-facing chat replies."""

from typing import Iterable, List

from telegram.helpers import escape_markdown

from models.expense import Expense
from models.query import ExpenseQuery

UNRECOGNIZED_INPUT = "Sorry, I can only read text messages and receipt photos."
DIDNT_UNDERSTAND = "I didn't understand your request. Could you clarify?"
LINK_ACCOUNT = (
    "You don't seem to be linked to an account yet. "
    "Please use the /start command to link your account."
)
QUERY_CLARIFY = (
    "Which period should I total? For example: \"How much did I spend on food last month?\""
)
PHOTO_FETCH_FAILED = "Failed to fetch file from Telegram"
LOG_FAILED = "Failed to log expense."
QUERY_FAILED = "An error occurred while retrieving expenses."
DELETE_FAILED = "Failed to delete expense."
GENERIC_FAILURE = "Something went wrong on our side. Please try again."
NO_EXPENSES = "No expenses found."
EXPENSE_NOT_FOUND = "Expense not found."

ADD_EXPENSE_USAGE = (
    "Please provide description, amount, category and optionally a date (YYYY-MM-DD), "
    "e.g. /addexpense Lunch, 12.50, Food, 2024-05-01"
)
DELETE_EXPENSE_USAGE = "Please provide the expense ID, e.g. /deleteexpense 3f2a..."

HELP = (
    "Send me a message like \"lunch 12.50 food\" or a photo of a receipt to log an expense, "
    "or ask \"how much did I spend last month?\".\n\n"
    "Commands:\n"
    "/start - link this chat to your Gastos account\n"
    "/link - get a sign-in link to connect your account\n"
    "/addexpense description, amount, category[, date]\n"
    "/viewexpenses - list your expenses\n"
    "/deleteexpense <id> - delete an expense\n"
    "/help - show this message"
)


def need_more_details(missing: Iterable[str] = ()) -> str:
    missing = list(missing)
    if missing:
        return (
            "Could you provide more details about this expense? "
            f"I couldn't work out: {', '.join(missing)}."
        )
    return "Could you provide more details about this expense, like the amount, category or description?"


def link_code(code: str, app_url: str) -> str:
    return (
        "Welcome! To link your account, please enter the following code in the Gastos Web App:\n\n"
        f"*{code}*\n\nVisit: {escape_markdown(app_url, version=1)}/telegram-bot"
    )


def link_token(token: str, app_url: str) -> str:
    return (
        "Open this link while signed in to the Gastos Web App to link your account:\n"
        f"{app_url}/auth?token={token}"
    )


def expense_logged(expense: Expense) -> str:
    return (
        f"Logged your spending of ${expense.amount:.2f} on {expense.category} "
        f"with description: \"{expense.description}\"."
    )


def expense_added(expense: Expense) -> str:
    return f"Expense \"{expense.description}\" added successfully!"


def expense_deleted(expense_id: str) -> str:
    return f"Expense ID {expense_id} deleted successfully!"


def spending_total(query: ExpenseQuery, total: float) -> str:
    scope = "" if query.is_all_categories else f" on {query.category}"
    return (
        f"Total spending from {query.start_date.isoformat()} to {query.end_date.isoformat()}"
        f"{scope} is ${total:.2f}."
    )


def expense_list(expenses: List[Expense]) -> str:
    lines = ["Your expenses:"]
    for index, e in enumerate(expenses, start=1):
        lines.append(
            f"{index}. {e.description or '-'} - ${e.amount:.2f} - {e.category} - "
            f"{e.date.date().isoformat()} (id: {e.id})"
        )
    return "\n".join(lines)
