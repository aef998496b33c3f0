"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from db.slots import SlotStore
from services.ledger import LedgerService


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject a test database for testing.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config
            is not used to locate the database.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)
        self.slots = SlotStore(self.db_manager)

        self.ledger = LedgerService(self.slots)
