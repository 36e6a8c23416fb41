"""Command handlers for the save-vault CLI."""

from .base import BaseCommandHandler
from .entries import AddHandler, ListHandler, RemoveHandler, RootHandler
from .files import AddFilesHandler, FilesHandler, RemoveFileHandler
from .snapshots import (
    BackupHandler,
    BackupsHandler,
    RemoveOneHandler,
    RenameHandler,
    RestoreHandler,
    VerifyHandler,
)

__all__ = [
    "AddFilesHandler",
    "AddHandler",
    "BackupHandler",
    "BackupsHandler",
    "BaseCommandHandler",
    "FilesHandler",
    "ListHandler",
    "RemoveFileHandler",
    "RemoveHandler",
    "RemoveOneHandler",
    "RenameHandler",
    "RestoreHandler",
    "RootHandler",
    "VerifyHandler",
]
