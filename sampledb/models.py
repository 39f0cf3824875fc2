"""Data models used by SampleDB."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .constants import DATASOURCE, DATASOURCE_NAME, EMPTY_VALUE, SAMPLE_DB_SCHEMA, SERVICE_NAME


@dataclass
class ProvisionState:
    """Reference count and working directory of the current generation."""

    count: int = 0
    working_dir: Path | None = None
    generation: int = 0

    @property
    def provisioned(self) -> bool:
        return self.working_dir is not None


@dataclass(frozen=True)
class DataSource:
    """Connection properties handed to consumers of the sample database."""

    url: str
    name: str = SAMPLE_DB_SCHEMA
    service_name: str = f"{DATASOURCE}/{SAMPLE_DB_SCHEMA}"
    user: str = SAMPLE_DB_SCHEMA
    password: str = EMPTY_VALUE
    driver: str = "sqlite3"

    @classmethod
    def from_descriptor(cls, descriptor: str) -> "DataSource":
        return cls(url=descriptor)

    def as_dict(self) -> dict[str, str]:
        """Return the properties under the keys consumers register them with."""

        return {
            DATASOURCE_NAME: self.name,
            SERVICE_NAME: self.service_name,
            "url": self.url,
            "user": self.user,
            "password": self.password,
            "driver": self.driver,
        }
