"""Operation layer for the Library System."""

from .library_service import (
    LibraryService,
    get_library_service,
    reset_library_service,
)

__all__ = [
    "LibraryService",
    "get_library_service",
    "reset_library_service",
]
