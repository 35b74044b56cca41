"""
Tools for the Library System server.

Each tool is a dictionary with ``name``, ``description`` and an async
``handler`` whose annotated keyword parameters become the input schema. The
server registers every entry of ``all_tools``.
"""

from .catalog import add_book, add_copies, add_member, get_book
from .circulation import checkout_book, get_overdue_copies, view_checkout_record

all_tools = [
    checkout_book,
    view_checkout_record,
    get_overdue_copies,
    get_book,
    add_book,
    add_copies,
    add_member,
]

__all__ = [
    "add_book",
    "add_copies",
    "add_member",
    "all_tools",
    "checkout_book",
    "get_book",
    "get_overdue_copies",
    "view_checkout_record",
]
