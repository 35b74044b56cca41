"""Tests for catalog and membership tools."""

import pytest

from library_system.config import reset_config
from library_system.database import BookRepository
from library_system.permissions import Role
from tests.conftest import BOOK_ISBN


def _text(result):
    return result.content[0].text


class TestGetBookTool:
    async def test_get_book(self, use_service, call_tool, sample_book):
        use_service(Role.LIBRARIAN)

        result = await call_tool("get_book", book_isbn=sample_book)

        assert result.is_error is False
        assert "3 of 3 copies available" in result.structured_content["message"]
        book = result.structured_content["book"]
        assert book["isbn"] == BOOK_ISBN
        assert [c["copy_number"] for c in book["copies"]] == [1, 2, 3]

    async def test_get_book_with_hyphens(self, use_service, call_tool, sample_book):
        use_service()

        result = await call_tool("get_book", book_isbn="978-0-13-468547-9")

        assert result.structured_content["book"]["isbn"] == sample_book

    async def test_get_book_not_found(self, use_service, call_tool):
        use_service()

        result = await call_tool("get_book", book_isbn="0000000000")

        assert result.is_error is True
        assert _text(result) == "not_found: Book not found"

    async def test_get_book_without_role(self, use_service, call_tool, sample_book):
        use_service(Role.NONE)

        result = await call_tool("get_book", book_isbn=sample_book)

        assert result.is_error is True
        assert _text(result).startswith("authorization: ")

    async def test_get_book_requires_librarian(self, use_service, call_tool, sample_book):
        use_service(Role.ADMIN)

        result = await call_tool("get_book", book_isbn=sample_book)

        assert _text(result).startswith("authorization: ")


class TestAddBookTool:
    async def test_input_schema(self, client):
        tools = {tool.name: tool for tool in await client.list_tools()}
        schema = tools["add_book"].inputSchema

        assert set(schema["properties"]) == {"isbn", "title", "borrow_duration", "copies"}
        assert set(schema["required"]) == {"isbn", "title"}

    async def test_add_book(self, use_service, call_tool):
        use_service(Role.ADMIN)

        result = await call_tool(
            "add_book", isbn="978-1-61729-223-9", title="Functional Programming", copies=2
        )

        assert result.is_error is False
        assert result.structured_content["message"].startswith("Added 'Functional Programming'")
        book = result.structured_content["book"]
        assert book["isbn"] == "9781617292239"
        assert book["borrow_duration"] == 14
        assert len(book["copies"]) == 2

    async def test_add_book_uses_configured_loan_period(self, use_service, call_tool, monkeypatch):
        monkeypatch.setenv("LIBRARY_SYSTEM_DEFAULT_BORROW_DURATION", "21")
        reset_config()
        use_service(Role.ADMIN)

        result = await call_tool("add_book", isbn="9781617292239", title="Functional Programming")

        assert result.structured_content["book"]["borrow_duration"] == 21
        assert len(result.structured_content["book"]["copies"]) == 1

    async def test_add_book_explicit_loan_period(self, use_service, call_tool):
        use_service(Role.ADMIN)

        result = await call_tool(
            "add_book", isbn="9781617292239", title="Functional Programming", borrow_duration=7
        )

        assert result.structured_content["book"]["borrow_duration"] == 7

    async def test_add_duplicate_book(self, use_service, call_tool, sample_book):
        use_service(Role.ADMIN)

        result = await call_tool("add_book", isbn=sample_book, title="Again")

        assert result.is_error is True
        assert _text(result) == f"conflict: Book with ISBN {sample_book} already exists"

    async def test_add_book_requires_admin(self, use_service, call_tool):
        use_service(Role.LIBRARIAN)

        result = await call_tool("add_book", isbn="9781617292239", title="Functional Programming")

        assert _text(result).startswith("authorization: ")

    async def test_add_book_hyphen_only_isbn(self, use_service, call_tool):
        use_service(Role.ADMIN)

        result = await call_tool("add_book", isbn="---", title="Only hyphens")

        assert result.is_error is True
        assert _text(result).startswith("validation: Invalid parameters")

    @pytest.mark.parametrize(
        "arguments",
        [
            {"title": "No ISBN"},
            {"isbn": "", "title": "Empty ISBN"},
            {"isbn": "9781617292239", "title": ""},
            {"isbn": "9781617292239", "title": "Negative", "copies": -1},
            {"isbn": "9781617292239", "title": "Zero loan", "borrow_duration": 0},
        ],
    )
    async def test_add_book_invalid_arguments(self, use_service, call_tool, db_manager, arguments):
        use_service(Role.ADMIN)

        result = await call_tool("add_book", **arguments)

        assert result.is_error is True
        with db_manager.session_scope() as session:
            assert BookRepository(session).count() == 0


class TestAddCopiesTool:
    async def test_add_copies(self, use_service, call_tool, sample_book):
        use_service(Role.ADMIN)

        result = await call_tool("add_copies", book_isbn=sample_book, count=2)

        assert result.is_error is False
        assert "Added 2 copies" in result.structured_content["message"]
        copies = result.structured_content["book"]["copies"]
        assert [c["copy_number"] for c in copies] == [1, 2, 3, 4, 5]
        assert all(c["available"] for c in copies)

    async def test_add_copies_zero(self, use_service, call_tool, sample_book):
        use_service(Role.ADMIN)

        result = await call_tool("add_copies", book_isbn=sample_book, count=0)

        assert result.is_error is True
        assert "count" in _text(result)

    async def test_add_copies_unknown_book(self, use_service, call_tool):
        use_service(Role.ADMIN)

        result = await call_tool("add_copies", book_isbn="0000000000", count=1)

        assert _text(result) == "not_found: Book not found"

    async def test_add_copies_requires_admin(self, use_service, call_tool, sample_book):
        use_service(Role.LIBRARIAN)

        result = await call_tool("add_copies", book_isbn=sample_book, count=1)

        assert _text(result).startswith("authorization: ")


class TestAddMemberTool:
    async def test_add_member(self, use_service, call_tool):
        use_service(Role.ADMIN)

        result = await call_tool(
            "add_member", name="Grace Hopper", email="grace@example.com", role="librarian"
        )

        assert result.is_error is False
        member = result.structured_content["member"]
        assert member["role"] == "librarian"
        assert member["checkout_record"]["entries"] == []
        assert (
            result.structured_content["message"]
            == f"Registered member Grace Hopper with id {member['id']}"
        )

    async def test_add_member_duplicate_email(self, use_service, call_tool, sample_member):
        use_service(Role.ADMIN)

        result = await call_tool("add_member", name="Jane Again", email="jane@example.com")

        assert result.is_error is True
        assert _text(result).startswith("conflict: ")

    async def test_add_member_invalid_role(self, use_service, call_tool):
        use_service(Role.ADMIN)

        result = await call_tool("add_member", name="Root", role="superuser")

        assert result.is_error is True

    async def test_add_member_requires_admin(self, use_service, call_tool):
        use_service(Role.LIBRARIAN)

        result = await call_tool("add_member", name="Grace Hopper")

        assert _text(result).startswith("authorization: ")
