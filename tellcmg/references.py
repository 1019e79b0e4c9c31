"""
Loading supporting material for a draft.

Attachments are read as text from local files. URL references are fetched
over HTTP and reduced to readable text; the assembler truncates both.
"""

import html
import logging
import re
from pathlib import Path
from typing import Optional, Union

import requests

from .errors import ValidationError
from .schemas.idea import Attachment, UrlReference

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 15
USER_AGENT = "TellCMG/1.0 (+idea-assistant)"

_SCRIPT_STYLE = re.compile(r"<(script|style|noscript)[^>]*>.*?</\1>", re.S | re.I)
_TITLE = re.compile(r"<title[^>]*>(.*?)</title>", re.S | re.I)
_TAG = re.compile(r"<[^>]+>")
_BLANKS = re.compile(r"\n\s*\n+")


def load_attachment(path: Union[str, Path]) -> Attachment:
    """Read a local text file as an attachment."""
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise ValidationError(f"Attachment not found: {file_path}")
    content = file_path.read_text(encoding="utf-8", errors="replace")
    return Attachment(name=file_path.name, content=content)


def html_to_text(markup: str) -> str:
    text = _SCRIPT_STYLE.sub(" ", markup)
    text = re.sub(r"<(br|/p|/div|/li|/h[1-6])[^>]*>", "\n", text, flags=re.I)
    text = html.unescape(_TAG.sub(" ", text))
    text = "\n".join(" ".join(line.split()) for line in text.splitlines())
    return _BLANKS.sub("\n\n", text).strip()


def fetch_url_reference(url: str, title: Optional[str] = None) -> UrlReference:
    """
    Fetch a URL and return its readable text.

    Raises:
        ValidationError: the URL is not http(s) or could not be fetched
    """
    if not re.match(r"^https?://", url, re.I):
        raise ValidationError(f"Only http(s) URLs can be referenced: {url}")

    try:
        response = requests.get(url, timeout=FETCH_TIMEOUT, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("Could not fetch reference %s: %s", url, e)
        raise ValidationError(f"Could not fetch {url}: {e}") from e

    content_type = response.headers.get("Content-Type", "")
    if "html" in content_type:
        page = response.text
        found = _TITLE.search(page)
        page_title = html.unescape(found.group(1)).strip() if found else ""
        return UrlReference(
            title=title or page_title or url,
            url=url,
            content=html_to_text(page),
            kind="webpage",
        )

    return UrlReference(title=title or url, url=url, content=response.text, kind="document")
