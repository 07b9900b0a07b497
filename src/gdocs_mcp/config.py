"""Configuration for gdocs-mcp.

Settings come from environment variables, optionally loaded from a .env file
in the working directory. Relative credential paths are resolved against the
working directory at load time.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

SCOPES = [
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/drive",
]

DEFAULT_CREDENTIALS_PATH = "credentials.json"
DEFAULT_TOKEN_PATH = "token.json"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class AuthConfig:
    """Where the OAuth client secrets and the saved user token live."""

    credentials_path: str
    token_path: str
    scopes: List[str] = field(default_factory=lambda: list(SCOPES))


def load_auth_config() -> AuthConfig:
    """Build an AuthConfig from the environment.

    Reads GDOCS_MCP_CREDENTIALS_PATH and GDOCS_MCP_TOKEN_PATH, after loading
    a .env file if one is present.
    """
    load_dotenv()
    credentials_path = os.getenv("GDOCS_MCP_CREDENTIALS_PATH", DEFAULT_CREDENTIALS_PATH)
    token_path = os.getenv("GDOCS_MCP_TOKEN_PATH", DEFAULT_TOKEN_PATH)
    return AuthConfig(
        credentials_path=str(Path(credentials_path).resolve()),
        token_path=str(Path(token_path).resolve()),
    )


def get_log_level() -> str:
    """Return the configured log level name (GDOCS_MCP_LOG_LEVEL, default INFO)."""
    load_dotenv()
    return os.getenv("GDOCS_MCP_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
