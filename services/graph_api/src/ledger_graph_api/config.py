"""Configuration for the ledger graph API service."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment settings for the graph API."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    api_version: str = Field("1.0.0", description="API version exposed via health endpoint.")
    neo4j_uri: str | None = Field(
        None,
        description="Neo4j bolt URI (bolt://... or neo4j://...)",
        alias="NEO4J_URI",
    )
    neo4j_user: str | None = Field(
        None,
        description="Neo4j user",
        alias="NEO4J_USER",
    )
    neo4j_password: str | None = Field(
        None,
        description="Neo4j password",
        alias="NEO4J_PASSWORD",
    )
    neo4j_database: str = Field(
        "neo4j",
        description="Neo4j database queried by the traversal",
        alias="NEO4J_DATABASE",
    )
    neo4j_max_pool_size: int = Field(
        50,
        ge=1,
        le=500,
        description="Upper bound of pooled Neo4j connections (concurrent sessions).",
        alias="NEO4J_MAX_POOL_SIZE",
    )
    graph_root_limit: int = Field(
        1000,
        ge=1,
        le=1000,
        description="Number of Transaction roots sampled per snapshot.",
        alias="GRAPH_ROOT_LIMIT",
    )

    @property
    def neo4j_configured(self) -> bool:
        return bool(self.neo4j_uri and self.neo4j_user and self.neo4j_password)


class HealthPayload(BaseModel):
    """Health response payload."""

    status: Literal["ok"]
    api_version: str


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
