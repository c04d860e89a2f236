"""
Authentication cookie loading.

Cookies come from the COOKIE_JSON environment variable, or from a JSON file
when the variable is absent. Loading never raises: any failure is logged and
an empty list is returned so the capture can continue unauthenticated.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .logging_setup import get_logger

logger = get_logger(__name__)

# Browser-extension exports use lowercase / chrome.cookies values.
_SAME_SITE = {
    'no_restriction': 'None',
    'none': 'None',
    'lax': 'Lax',
    'strict': 'Strict',
}


def load_cookies(cookie_file: Path, environ: Optional[Mapping[str, str]] = None) -> List[Dict[str, Any]]:
    """
    Load the cookie set for one capture.

    Args:
        cookie_file: Fallback JSON file used when COOKIE_JSON is not set
        environ: Environment mapping (defaults to os.environ)

    Returns:
        List of cookie records, or [] if nothing could be loaded
    """
    env = os.environ if environ is None else environ
    try:
        cookie_json = env.get('COOKIE_JSON')
        if cookie_json:
            logger.info("Loading cookies from environment variable")
            cookies = json.loads(cookie_json)
        else:
            logger.info("Loading cookies from %s", cookie_file)
            with open(cookie_file, 'r', encoding='utf-8') as f:
                cookies = json.load(f)

        if not isinstance(cookies, list):
            raise ValueError(f"expected a JSON array of cookies, got {type(cookies).__name__}")
        return cookies
    except Exception as e:
        logger.error("Error loading cookies: %s", e)
        return []


def normalize_cookies(records: List[Any], default_url: str) -> List[Dict[str, Any]]:
    """
    Convert exported cookie records into Playwright's `add_cookies` shape.

    Unknown keys (hostOnly, storeId, session, ...) are dropped, `expirationDate`
    becomes `expires` and `sameSite` is mapped onto Strict/Lax/None. Records
    without a domain are bound to `default_url`.
    """
    cookies = []
    for index, record in enumerate(records):
        if not isinstance(record, dict) or 'name' not in record or 'value' not in record:
            logger.warning("Skipping cookie #%d: missing name or value", index)
            continue

        cookie = {'name': str(record['name']), 'value': str(record['value'])}
        if record.get('domain'):
            cookie['domain'] = record['domain']
            cookie['path'] = record.get('path') or '/'
        else:
            cookie['url'] = record.get('url') or default_url

        expires = record.get('expires', record.get('expirationDate'))
        if isinstance(expires, (int, float)) and expires > 0 and not record.get('session'):
            cookie['expires'] = float(expires)

        for key in ('httpOnly', 'secure'):
            if key in record:
                cookie[key] = bool(record[key])

        same_site = _SAME_SITE.get(str(record.get('sameSite', '')).lower())
        if same_site:
            cookie['sameSite'] = same_site

        cookies.append(cookie)
    return cookies
