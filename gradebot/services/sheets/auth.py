"""
Service account authentication for the Sheets API.
"""
import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2.service_account import Credentials

from ...errors import AuthError

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/spreadsheets']


def load_service_account_info(raw: str) -> Dict[str, Any]:
    """
    Parse the robot credential.

    Accepts, in order: a JSON document, base64-encoded JSON, or a path to a
    service account key file.

    Raises:
        AuthError: If none of the forms yields a JSON object
    """
    text = raw.strip()
    if not text:
        raise AuthError("Service account credential is empty")

    if text.startswith('{'):
        return _as_object(text, "Service account JSON is malformed")

    try:
        decoded = base64.b64decode(text, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError, ValueError):
        decoded = None
    if decoded is not None and decoded.lstrip().startswith('{'):
        return _as_object(decoded, "Base64 service account JSON is malformed")

    path = Path(text).expanduser()
    if path.is_file():
        logger.info(f"Loading service account key from {path}")
        return _as_object(path.read_text(encoding='utf-8'), f"Key file {path} is not valid JSON")

    raise AuthError("Service account credential is neither JSON, base64 JSON, nor a key file path")


def _as_object(text: str, message: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise AuthError(f"{message}: {e}") from e
    if not isinstance(data, dict):
        raise AuthError(f"{message}: expected a JSON object")
    return data


def authenticate(info: Dict[str, Any], scopes: Optional[List[str]] = None) -> Credentials:
    """
    Build service account credentials and exchange them for an access token.

    The token lives about an hour and is acquired once per invocation.

    Raises:
        AuthError: If the key is malformed or the token exchange is rejected
    """
    try:
        credentials = Credentials.from_service_account_info(info, scopes=scopes or SCOPES)
    except (ValueError, KeyError) as e:
        raise AuthError(f"Invalid service account credential: {e}") from e

    logger.info(f"Requesting access token for {credentials.service_account_email}")
    try:
        credentials.refresh(Request())
    except google.auth.exceptions.RefreshError as e:
        raise AuthError(f"Token exchange rejected: {e}") from e
    except google.auth.exceptions.TransportError as e:
        raise AuthError(f"Token endpoint unreachable: {e}") from e

    return credentials
