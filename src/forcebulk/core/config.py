"""Configuration models for the bulk job façade.

Pydantic-based, immutable, and injected into `BulkQueryJob` so tests can shrink
the poll interval without touching the environment.
"""

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_POLL_INTERVAL = 10.0


class BulkJobConfig(BaseModel):
    """Configuration for BulkQueryJob behavior.

    Attributes:
        poll_interval: Seconds between status polls in `wait()` (float for test flexibility)
        delete_method: HTTP verb used by `delete()`; the platform has historically
            accepted GET on the job endpoint
    """

    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        gt=0,
        description="Fixed interval in seconds between job status polls",
    )

    delete_method: Literal["GET", "DELETE"] = Field(
        default="GET",
        description="HTTP method sent to jobs/query/{id} when deleting a job",
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @classmethod
    def from_app_settings(cls, settings) -> "BulkJobConfig":
        """Build the config from a BulkSettings instance."""
        return cls(
            poll_interval=settings.FORCEBULK_POLL_INTERVAL,
            delete_method=settings.FORCEBULK_DELETE_METHOD,
        )
