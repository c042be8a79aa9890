import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models.backoff import BackoffPolicy

# Load environment variables from .env file if it exists
load_dotenv()

# BatchWriteItem accepts at most 25 write requests per call
MAX_BATCH_SIZE = 25

# TransactWriteItems accepts at most 100 actions per call
MAX_TRANSACTION_SIZE = 100


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() == "true"


class DynamoDBConfig(BaseModel):
    """Configuration for the DynamoDB connection and bulk operation behaviour."""

    aws_access_key_id: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_ACCESS_KEY_ID"),
        description="AWS access key ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SECRET_ACCESS_KEY"),
        description="AWS secret access key"
    )

    aws_session_token: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_SESSION_TOKEN"),
        description="AWS session token (temporary credentials)"
    )

    profile_name: Optional[str] = Field(
        default_factory=lambda: os.getenv("AWS_PROFILE"),
        description="Named AWS profile; explicit keys take precedence"
    )

    region_name: str = Field(
        default_factory=lambda: os.getenv("AWS_REGION", "us-east-1"),
        description="AWS region name"
    )

    # DynamoDB specific settings
    endpoint_url: Optional[str] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_ENDPOINT_URL"),
        description="DynamoDB endpoint URL (for local development)"
    )

    # Connection settings
    max_pool_connections: int = Field(
        default=50,
        description="Maximum number of connections in the connection pool"
    )

    retries: int = Field(
        default=3,
        description="botocore transport-level retry attempts"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Request timeout in seconds"
    )

    # Bulk write settings
    batch_size: int = Field(
        default=MAX_BATCH_SIZE,
        description="Operations per BatchWriteItem request"
    )

    backoff_initial_delay: float = Field(
        default=0.1,
        gt=0,
        description="Delay before the first resubmission of unprocessed items, in seconds"
    )

    backoff_max_delay: Optional[float] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_BACKOFF_MAX_DELAY"),
        validate_default=True,
        description="Ceiling for a single backoff delay (unset = no ceiling)"
    )

    backoff_max_attempts: Optional[int] = Field(
        default_factory=lambda: os.getenv("DYNAMODB_BACKOFF_MAX_ATTEMPTS"),
        validate_default=True,
        description="Cap on BatchWriteItem calls per chunk (unset = retry until processed)"
    )

    # Table lifecycle settings
    table_wait_delay_seconds: int = Field(
        default=5,
        ge=1,
        description="Polling interval while waiting for a table to appear/disappear"
    )

    table_wait_max_seconds: int = Field(
        default=60,
        ge=1,
        description="Maximum time to wait for a table to appear/disappear"
    )

    # Logging settings
    log_internals: bool = Field(
        default_factory=lambda: _env_flag("DYNAMODB_LOG_INTERNALS"),
        description="Log boto3/botocore internals at debug level"
    )

    @field_validator('region_name')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region name."""
        if not v:
            raise ValueError("AWS region name is required")
        return v

    @field_validator('backoff_max_delay', 'backoff_max_attempts', mode='before')
    @classmethod
    def validate_backoff_env(cls, v):
        """Treat an empty environment value as unset; anything else is parsed by the field type."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('batch_size')
    @classmethod
    def validate_batch_size(cls, v):
        """Validate batch size against the BatchWriteItem limit."""
        if not 1 <= v <= MAX_BATCH_SIZE:
            raise ValueError(f"Batch size must be between 1 and {MAX_BATCH_SIZE}")
        return v

    @model_validator(mode='after')
    def validate_backoff(self):
        """Validate the optional backoff bounds."""
        if self.backoff_max_attempts is not None and self.backoff_max_attempts < 1:
            raise ValueError("backoff_max_attempts must be at least 1")
        if self.backoff_max_delay is not None and self.backoff_max_delay < self.backoff_initial_delay:
            raise ValueError("backoff_max_delay cannot be smaller than backoff_initial_delay")
        return self

    def backoff_policy(self) -> BackoffPolicy:
        """Build the backoff policy for unprocessed batch items."""
        return BackoffPolicy(
            initial_delay=self.backoff_initial_delay,
            max_delay=self.backoff_max_delay,
            max_attempts=self.backoff_max_attempts,
        )

    @property
    def table_wait_max_attempts(self) -> int:
        """Waiter attempts needed to cover table_wait_max_seconds."""
        return max(1, -(-self.table_wait_max_seconds // self.table_wait_delay_seconds))

    @classmethod
    def from_env(cls) -> 'DynamoDBConfig':
        """Create configuration from environment variables.

        Returns:
            DynamoDBConfig instance
        """
        return cls()

    @classmethod
    def for_local_development(cls) -> 'DynamoDBConfig':
        """Create configuration for DynamoDB Local / LocalStack.

        Returns:
            DynamoDBConfig instance configured for local development
        """
        return cls(
            aws_access_key_id="local",
            aws_secret_access_key="local",
            region_name="us-east-1",
            endpoint_url="http://localhost:8000",
            table_wait_delay_seconds=1,
            log_internals=False
        )

    model_config = ConfigDict(
        validate_assignment=True,
    )
