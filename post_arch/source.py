# post_arch/source.py

import sys
from pathlib import Path
from typing import Any, Optional, TextIO
from urllib.parse import unquote, urlparse

import httpx
import yaml

from post_arch.utils.exceptions import ConfigError
from post_arch.utils.logger import get_logger

logger = get_logger(__name__)

STDIN_SOURCE = "-"
_REMOTE_SCHEMES = ("http://", "https://")
_FILE_SCHEME = "file://"


def is_remote(source: str) -> bool:
    return source.startswith(_REMOTE_SCHEMES)


def fetch_url(url: str, client: Optional[httpx.Client] = None, timeout: float = 30.0) -> str:
    """Downloads the document text, following redirects."""
    own_client = client is None
    if own_client:
        client = httpx.Client(follow_redirects=True, timeout=timeout)
    try:
        response = client.get(url, follow_redirects=True)
        response.raise_for_status()
        return response.text
    except httpx.HTTPStatusError as e:
        raise ConfigError(url, f"Server returned {e.response.status_code}")
    except httpx.HTTPError as e:
        raise ConfigError(url, f"Download failed: {e}")
    finally:
        if own_client:
            client.close()


def read_source(source: str, client: Optional[httpx.Client] = None, stdin: Optional[TextIO] = None) -> str:
    """
    Returns the raw text of a menu document.

    source is an http(s) URL, a file:// URL, '-' for standard input, or a local path.
    """
    if is_remote(source):
        logger.debug(f"Fetching menu document from {source}")
        return fetch_url(source, client=client)

    if source == STDIN_SOURCE:
        stream = stdin if stdin is not None else sys.stdin
        try:
            return stream.read()
        except OSError as e:
            raise ConfigError("<stdin>", f"Error reading standard input: {e}")

    path = Path(unquote(urlparse(source).path)) if source.startswith(_FILE_SCHEME) else Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(source, f"Error reading menu file: {e}")


def parse_document(text: str, source: str = "<document>") -> Any:
    """
    Decodes YAML keeping every scalar as the text written in the document,
    so `- yes` stays the package "yes" and `1.10` stays "1.10".
    """
    try:
        return yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise ConfigError(source, f"Failed to load YAML: {e}")


def load_document(source: str, client: Optional[httpx.Client] = None, stdin: Optional[TextIO] = None) -> Any:
    """Reads and decodes a menu document. Every failure is a ConfigError."""
    return parse_document(read_source(source, client=client, stdin=stdin), source=source)
