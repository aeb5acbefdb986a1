"""Repository factory."""

from finseries.core.config import StorageConfig
from finseries.core.data.repositories.base import FinancialRecordRepository
from finseries.core.data.repositories.duckdb import DuckDBRecordRepository
from finseries.core.data.repositories.memory import InMemoryRecordRepository
from finseries.core.data.storage import DuckDBConnectionFactory, DuckDBFactoryConfig
from finseries.core.exceptions import ConfigurationError
from finseries.core.logging import get_logger

logger = get_logger("repository.factory")


def create_repository(config: StorageConfig | None = None) -> FinancialRecordRepository:
    """Build the repository selected by ``config.backend``.

    Args:
        config: storage configuration, defaults to :class:`StorageConfig`

    Returns:
        a ready-to-use repository; DuckDB tables are created on first use
    """
    config = config or StorageConfig()
    if config.backend == "memory":
        logger.info("using in-memory record store")
        return InMemoryRecordRepository()
    if config.backend == "duckdb":
        logger.info("using duckdb record store", database=config.database)
        factory = DuckDBConnectionFactory(DuckDBFactoryConfig(database=config.database, pragmas={"threads": config.threads}))
        return DuckDBRecordRepository.from_factory(factory)
    raise ConfigurationError(f"unknown storage backend '{config.backend}'", details={"backend": config.backend})


def create_test_repository() -> FinancialRecordRepository:
    """Create an empty in-memory repository."""
    return InMemoryRecordRepository()
