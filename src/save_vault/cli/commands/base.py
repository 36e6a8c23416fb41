"""Base command handler for save-vault CLI commands.

This module provides the abstract base class that all command handlers
inherit from, ensuring consistent interface and shared functionality
across commands.
"""

from abc import ABC, abstractmethod
from argparse import Namespace

from save_vault.config import ConfigManager
from save_vault.core.vault import VaultService
from save_vault.logger import get_logger

logger = get_logger(__name__)


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    Handlers receive their dependencies from CLIRunner, which acts as the
    composition root, so tests can inject a VaultService pointed at a
    temporary store.

    Attributes:
        operation: Name shown in front of failures, e.g. "Backup"
        mutates: Whether the command changes the store and therefore needs
            the process lock

    """

    operation: str = "Operation"
    mutates: bool = False

    def __init__(
        self,
        config_manager: ConfigManager,
        vault: VaultService,
    ) -> None:
        """Initialize the command handler with shared dependencies.

        Args:
            config_manager: Configuration management instance
            vault: Service executing the store operations

        """
        self.config_manager = config_manager
        self.vault = vault
        self.global_config = vault.global_config

    @abstractmethod
    async def execute(self, args: Namespace) -> None:
        """Execute the command with the given arguments.

        Args:
            args: Parsed command-line arguments

        This method must be implemented by all concrete command handlers.

        """

    def _ensure_directories(self) -> None:
        """Ensure required directories exist based on global config."""
        self.config_manager.ensure_directories_from_config(self.global_config)
