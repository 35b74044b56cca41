"""
Result and error builders shared by the tool handlers.

A successful call returns a dict (FastMCP sends it as structured content)
with a human-readable ``message`` next to the data. A failed call raises
``ToolError``, which marks the MCP result as an error; its text starts with
the error kind, e.g. ``not_found: Book not found``.
"""

from typing import Any

from fastmcp.exceptions import ToolError
from pydantic import ValidationError

from ..errors import InvalidInputError, LibrarySystemError


def success_response(message: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"message": message, **data}


def tool_error(error: LibrarySystemError) -> ToolError:
    return ToolError(f"{error.kind}: {error.message}")


def invalid_arguments_error(error: ValidationError) -> ToolError:
    """Turn a Pydantic validation failure into a ``validation`` tool error."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
        for err in error.errors()
    )
    return tool_error(InvalidInputError(f"Invalid parameters: {details}"))
