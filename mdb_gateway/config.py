"""
Configuration management for MDB_GATEWAY.

Configuration is optional: every gateway operation works with the defaults
in ``constants``. ``GatewayConfig`` gathers the connection parameters and the
per-operation deadlines in one validated object, read from the environment
or passed directly.

Example:
    # Using environment variables
    config = GatewayConfig.from_env()
    handle = await connect(config.mongo_uri, config.db_name, config=config)

    # Or using direct parameters
    config = GatewayConfig(
        mongo_uri="mongodb://localhost:27017",
        db_name="my_db",
        deadlines=OperationDeadlines(find_many=60),
    )
"""

import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_DELETE_MANY_TIMEOUT,
    DEFAULT_DELETE_ONE_TIMEOUT,
    DEFAULT_FIND_ALL_TIMEOUT,
    DEFAULT_FIND_MANY_TIMEOUT,
    DEFAULT_FIND_ONE_TIMEOUT,
    DEFAULT_INSERT_MANY_TIMEOUT,
    DEFAULT_INSERT_ONE_TIMEOUT,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_PING_TIMEOUT,
)
from .exceptions import ConfigurationError

# Environment variable prefix for deadline overrides
DEADLINE_ENV_PREFIX = "MDB_GATEWAY_"


class OperationDeadlines(BaseModel):
    """
    Deadlines, in seconds, applied to each store operation.

    Every value must be strictly positive: no operation may block
    indefinitely.
    """

    model_config = ConfigDict(frozen=True)

    connect: float = Field(DEFAULT_CONNECT_TIMEOUT, gt=0)
    ping: float = Field(DEFAULT_PING_TIMEOUT, gt=0)
    insert_one: float = Field(DEFAULT_INSERT_ONE_TIMEOUT, gt=0)
    insert_many: float = Field(DEFAULT_INSERT_MANY_TIMEOUT, gt=0)
    find_one: float = Field(DEFAULT_FIND_ONE_TIMEOUT, gt=0)
    find_many: float = Field(DEFAULT_FIND_MANY_TIMEOUT, gt=0)
    find_all: float = Field(DEFAULT_FIND_ALL_TIMEOUT, gt=0)
    delete_one: float = Field(DEFAULT_DELETE_ONE_TIMEOUT, gt=0)
    delete_many: float = Field(DEFAULT_DELETE_MANY_TIMEOUT, gt=0)

    def for_operation(self, operation: str) -> float:
        """
        Look up the deadline for an operation name.

        Raises:
            ConfigurationError: If the operation has no configured deadline
        """
        try:
            return getattr(self, operation)
        except AttributeError as e:
            raise ConfigurationError(
                f"No deadline configured for operation '{operation}'",
                config_key="deadlines",
                config_value=operation,
            ) from e

    @classmethod
    def from_env(cls) -> "OperationDeadlines":
        """Build deadlines from ``MDB_GATEWAY_<OPERATION>_TIMEOUT`` variables."""
        overrides = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{DEADLINE_ENV_PREFIX}{name.upper()}_TIMEOUT")
            if raw:
                overrides[name] = raw
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid operation deadline: {e}",
                config_key="deadlines",
                config_value=overrides,
            ) from e


class GatewayConfig(BaseModel):
    """
    Gateway configuration.

    Attributes:
        mongo_uri: MongoDB connection URI (forwarded untouched to the driver)
        db_name: Database to resolve on connect
        max_pool_size: Maximum connection pool size
        min_pool_size: Minimum connection pool size
        deadlines: Per-operation deadlines
    """

    model_config = ConfigDict(frozen=True)

    mongo_uri: str = ""
    db_name: str = ""
    max_pool_size: int = Field(DEFAULT_MAX_POOL_SIZE, ge=1)
    min_pool_size: int = Field(DEFAULT_MIN_POOL_SIZE, ge=0)
    deadlines: OperationDeadlines = Field(default_factory=OperationDeadlines)

    @model_validator(mode="after")
    def _check_pool_bounds(self) -> "GatewayConfig":
        if self.min_pool_size > self.max_pool_size:
            raise ValueError(
                f"min_pool_size ({self.min_pool_size}) cannot be greater than "
                f"max_pool_size ({self.max_pool_size})"
            )
        return self

    @classmethod
    def from_env(cls, **overrides) -> "GatewayConfig":
        """
        Build configuration from environment variables.

        Reads ``MONGO_URI``, ``DB_NAME``, ``MONGO_MAX_POOL_SIZE``,
        ``MONGO_MIN_POOL_SIZE`` and the ``MDB_GATEWAY_*_TIMEOUT`` deadlines.
        Keyword arguments take precedence over the environment.

        Raises:
            ConfigurationError: If a value is invalid
        """
        values = {
            "mongo_uri": os.getenv("MONGO_URI", ""),
            "db_name": os.getenv("DB_NAME", ""),
            "max_pool_size": os.getenv("MONGO_MAX_POOL_SIZE", str(DEFAULT_MAX_POOL_SIZE)),
            "min_pool_size": os.getenv("MONGO_MIN_POOL_SIZE", str(DEFAULT_MIN_POOL_SIZE)),
        }
        if "deadlines" not in overrides:
            values["deadlines"] = OperationDeadlines.from_env()
        values.update(overrides)
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid gateway configuration: {e}") from e

    def validate_connection(self) -> None:
        """
        Check that the values needed to connect are present.

        Raises:
            ConfigurationError: If the URI or database name is missing
        """
        if not self.mongo_uri:
            raise ConfigurationError(
                "mongo_uri is required (set MONGO_URI environment variable or pass directly)",
                config_key="mongo_uri",
            )
        if not self.db_name:
            raise ConfigurationError(
                "db_name is required (set DB_NAME environment variable or pass directly)",
                config_key="db_name",
            )
