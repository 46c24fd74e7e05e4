"""State management module."""
from src.state.database import DatabaseManager, DatabaseError
from src.state.export import export_thread, export_thread_to_file, import_thread, import_thread_from_file, ThreadImportError
from src.state.repositories import ThreadRepository
from src.state.thread_service import ThreadNotFoundError, create_thread, load_thread, mark_thread_deleted, mark_thread_read, post_message, save_thread
__all__ = ["DatabaseManager", "DatabaseError", "export_thread", "export_thread_to_file",
           "import_thread", "import_thread_from_file", "ThreadImportError", "ThreadRepository",
           "ThreadNotFoundError", "create_thread", "load_thread", "mark_thread_deleted",
           "mark_thread_read", "post_message", "save_thread"]
