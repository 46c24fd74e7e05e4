"""CLI commands."""

from . import (
    create,
    delete,
    export_thread,
    import_thread,
    init,
    post,
    read,
    show,
)

__all__ = [
    "create",
    "delete",
    "export_thread",
    "import_thread",
    "init",
    "post",
    "read",
    "show",
]
