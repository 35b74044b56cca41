"""
Tests for circulation tools (checkout, checkout record, overdue copies).

These tests cover:
1. Advertised input schemas
2. Argument validation by the server
3. Success results with structured content
4. Error results flagged as errors and tagged with the error kind
"""

from datetime import timedelta

from library_system.permissions import Role
from tests.conftest import BOOK_ISBN, FIXED_NOW


def _text(result):
    return result.content[0].text


class TestCheckoutBookTool:
    """Test the checkout_book tool."""

    async def test_input_schema(self, client):
        tools = {tool.name: tool for tool in await client.list_tools()}
        schema = tools["checkout_book"].inputSchema

        assert set(schema["properties"]) == {"member_id", "book_isbn"}
        assert set(schema["required"]) == {"member_id", "book_isbn"}
        assert schema["properties"]["member_id"]["minimum"] == 0

    async def test_checkout_success(self, use_service, call_tool, sample_member, sample_book):
        use_service(Role.LIBRARIAN)

        result = await call_tool("checkout_book", member_id=sample_member, book_isbn=sample_book)

        assert result.is_error is False
        data = result.structured_content
        assert "Due date: January 15, 2024" in data["message"]
        assert "14-day loan" in data["message"]

        entry = data["entry"]
        assert entry["checkout_date"] == FIXED_NOW.isoformat()
        assert entry["due_date"] == (FIXED_NOW + timedelta(days=14)).isoformat()
        assert entry["fine"] == 0.0
        assert data["member"]["id"] == sample_member
        assert len(data["member"]["checkout_record"]["entries"]) == 1

    async def test_checkout_negative_member_id(self, use_service, call_tool):
        use_service()

        result = await call_tool("checkout_book", member_id=-1, book_isbn=BOOK_ISBN)

        assert result.is_error is True
        assert "member_id" in _text(result)

    async def test_checkout_missing_arguments(self, use_service, call_tool):
        use_service()

        result = await call_tool("checkout_book")

        assert result.is_error is True

    async def test_checkout_requires_librarian(
        self, use_service, call_tool, sample_member, sample_book
    ):
        use_service(Role.ADMIN)

        result = await call_tool("checkout_book", member_id=sample_member, book_isbn=sample_book)

        assert result.is_error is True
        assert _text(result).startswith("authorization: ")
        assert "privilege" in _text(result)

    async def test_checkout_member_not_found(self, use_service, call_tool, sample_book):
        use_service()

        result = await call_tool("checkout_book", member_id=999, book_isbn=sample_book)

        assert result.is_error is True
        assert _text(result) == "not_found: Member not found"

    async def test_checkout_book_not_found(self, use_service, call_tool, sample_member):
        use_service()

        result = await call_tool("checkout_book", member_id=sample_member, book_isbn="0000000000")

        assert _text(result) == "not_found: Book not found"

    async def test_checkout_hyphen_only_isbn(self, use_service, call_tool, sample_member):
        use_service()

        result = await call_tool("checkout_book", member_id=sample_member, book_isbn="---")

        assert result.is_error is True
        assert _text(result) == "validation: Book ISBN can't be empty"

    async def test_checkout_no_available_copy(
        self, use_service, call_tool, sample_member, make_book
    ):
        use_service()
        isbn = make_book(copies=1)

        first = await call_tool("checkout_book", member_id=sample_member, book_isbn=isbn)
        second = await call_tool("checkout_book", member_id=sample_member, book_isbn=isbn)

        assert first.is_error is False
        assert second.is_error is True
        assert _text(second) == "conflict: There is no available copies"


class TestViewCheckoutRecordTool:
    """Test the view_checkout_record tool."""

    async def test_empty_record(self, use_service, call_tool, sample_member):
        use_service(Role.LIBRARIAN)

        result = await call_tool("view_checkout_record", member_id=sample_member)

        assert result.is_error is False
        assert "has 0 checkout entries" in result.structured_content["message"]
        assert result.structured_content["member"]["checkout_record"]["entries"] == []

    async def test_record_after_checkout(self, use_service, call_tool, sample_member, sample_book):
        use_service()
        await call_tool("checkout_book", member_id=sample_member, book_isbn=sample_book)

        result = await call_tool("view_checkout_record", member_id=sample_member)

        assert "has 1 checkout entry" in result.structured_content["message"]
        assert result.structured_content["member"]["name"] == "Jane Reader"

    async def test_member_not_found(self, use_service, call_tool):
        use_service()

        result = await call_tool("view_checkout_record", member_id=404)

        assert result.is_error is True
        assert _text(result).startswith("not_found: ")

    async def test_not_logged_in(self, use_service, call_tool, sample_member):
        use_service(None)

        result = await call_tool("view_checkout_record", member_id=sample_member)

        assert result.is_error is True
        assert _text(result).startswith("authorization: ")


class TestGetOverdueCopiesTool:
    """Test the get_overdue_copies tool."""

    async def test_no_overdue_copies(self, use_service, call_tool, sample_member, sample_book):
        use_service()
        await call_tool("checkout_book", member_id=sample_member, book_isbn=sample_book)

        result = await call_tool("get_overdue_copies", book_isbn=sample_book)

        assert result.is_error is False
        assert result.structured_content == {
            "message": f"No overdue copies of '{sample_book}'",
            "book_isbn": sample_book,
            "overdue_copies": [],
        }

    async def test_overdue_copies_listed(self, use_service, call_tool, sample_member, sample_book):
        lender = use_service(Role.LIBRARIAN)
        lender.checkout_book(sample_member, sample_book)
        lender.checkout_book(sample_member, sample_book)

        use_service(Role.LIBRARIAN, now=FIXED_NOW + timedelta(days=30))
        result = await call_tool("get_overdue_copies", book_isbn=sample_book)

        copies = result.structured_content["overdue_copies"]
        assert [c["copy_number"] for c in copies] == [1, 2]
        assert all(c["member_id"] == sample_member for c in copies)
        assert result.structured_content["message"].startswith(
            f"2 overdue copies of '{sample_book}'"
        )

    async def test_book_not_found(self, use_service, call_tool):
        use_service()

        result = await call_tool("get_overdue_copies", book_isbn="0000000000")

        assert _text(result) == "not_found: Book not found"

    async def test_empty_isbn(self, use_service, call_tool):
        use_service()

        result = await call_tool("get_overdue_copies", book_isbn="")

        assert result.is_error is True
