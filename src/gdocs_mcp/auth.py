"""OAuth credentials for gdocs-mcp.

Loads the saved user token, refreshes it when it has expired, and falls back
to the installed-app browser flow when there is no usable token. The token is
written back to disk after every refresh or new consent.
"""

from pathlib import Path

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from .config import AuthConfig
from .logging_config import get_logger

logger = get_logger(__name__)


def is_auth_configured(config: AuthConfig) -> bool:
    """True if the OAuth client secrets file exists."""
    return Path(config.credentials_path).exists()


def _load_saved_token(config: AuthConfig):
    token_path = Path(config.token_path)
    if not token_path.exists() or token_path.stat().st_size == 0:
        return None
    try:
        return Credentials.from_authorized_user_file(str(token_path), config.scopes)
    except ValueError as e:
        # Malformed or incomplete token file: fall through to a fresh consent
        logger.warning("saved_token_unusable", token_path=str(token_path), error=str(e))
        return None


def _save_token(credentials, config: AuthConfig) -> None:
    token_path = Path(config.token_path)
    token_path.parent.mkdir(parents=True, exist_ok=True)
    token_path.write_text(credentials.to_json())
    logger.info("token_saved", token_path=str(token_path))


def load_credentials(config: AuthConfig):
    """
    Return valid user credentials for the Docs and Drive scopes.

    Args:
        config: Paths to the client secrets and the saved token

    Returns:
        google.oauth2.credentials.Credentials ready for API clients

    Raises:
        FileNotFoundError: If the client secrets file is missing and a new consent is needed
        google.auth.exceptions.RefreshError: If the saved token cannot be refreshed
    """
    credentials = _load_saved_token(config)

    if credentials and credentials.valid:
        logger.info("token_loaded", token_path=config.token_path)
        return credentials

    if credentials and credentials.expired and credentials.refresh_token:
        logger.info("token_refreshing")
        credentials.refresh(Request())
    else:
        if not is_auth_configured(config):
            raise FileNotFoundError(f"OAuth client secrets not found: {config.credentials_path}")
        logger.info("oauth_flow_starting", credentials_path=config.credentials_path)
        flow = InstalledAppFlow.from_client_secrets_file(config.credentials_path, config.scopes)
        credentials = flow.run_local_server(port=0)

    _save_token(credentials, config)
    return credentials
