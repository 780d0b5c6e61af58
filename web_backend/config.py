# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Waveriders Collective Inc.

"""
Settings for the Web Console backend.

Values come from the environment (or .env). Config service hosts and
request limits default to the consolectl constants so the MCP server and
the backend agree unless overridden.
"""

import os
from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings

from consolectl.constants import (
    CONFIG_API_URL,
    DETAIL_FETCH_WORKERS,
    REQUEST_TIMEOUT,
    SSM_API_URL,
    SUBSCRIBER_API_URL,
)


class Settings(BaseSettings):
    """Backend settings."""

    app_name: str = "Web Console API"
    app_version: str = "0.1.0"
    api_prefix: str = "/api/v1"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # uvicorn bind
    host: str = "0.0.0.0"
    port: int = 8000

    # Browser front-end origins
    allowed_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    # Config service hosts
    config_api_url: str = CONFIG_API_URL
    subscriber_api_url: str = SUBSCRIBER_API_URL
    ssm_api_url: str = SSM_API_URL

    api_timeout: int = REQUEST_TIMEOUT  # seconds
    detail_fetch_workers: int = DETAIL_FETCH_WORKERS

    @field_validator("config_api_url", "subscriber_api_url", "ssm_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("detail_fetch_workers")
    @classmethod
    def at_least_one_worker(cls, v: int) -> int:
        return max(1, v)

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
