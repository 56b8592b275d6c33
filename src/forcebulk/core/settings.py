from typing import Literal

from pydantic import HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings
from rich import print

from forcebulk.adapters.logging_adapter import LoggingAdapter
from forcebulk.core.interfaces.logging import LoggingPort


# using pydantic_settings to manage environment variables
# and do automatic type casting in a central place
class BulkSettings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }
    FORCEBULK_LOG_LEVEL: str = "INFO"
    FORCEBULK_INSTANCE_URL: HttpUrl | None = None
    FORCEBULK_API_VERSION: str = "59.0"
    FORCEBULK_ACCESS_TOKEN: SecretStr = SecretStr("")
    # Seconds between status polls while waiting on a job
    FORCEBULK_POLL_INTERVAL: float = 10.0
    FORCEBULK_DELETE_METHOD: Literal["GET", "DELETE"] = "GET"
    FORCEBULK_HTTP_TIMEOUT: float = 120.0
    FORCEBULK_HTTP_CONNECT_TIMEOUT: float = 10.0

    @field_validator("FORCEBULK_API_VERSION", mode="before")
    def strip_version_prefix(cls, value: str) -> str:
        """Accept both '59.0' and 'v59.0'."""
        return str(value).lstrip("vV")

    def print_settings(self, logger: LoggingPort):
        """Prints the settings for debugging purposes"""
        logger.info("forcebulk settings:")
        print(self)


app_settings = BulkSettings()

logger = LoggingAdapter("forcebulk", app_settings.FORCEBULK_LOG_LEVEL)
