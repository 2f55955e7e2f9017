"""
Cookie header parsing.
"""
from typing import Dict, Optional
from urllib.parse import unquote


def parse_cookies(cookie_header: Optional[str]) -> Dict[str, str]:
    """
    Split a raw Cookie header into a name -> decoded value mapping.

    Pairs are separated by ';'. Each pair is split on its first '=', so
    values may themselves contain '='. Pairs without '=' are ignored.
    A later pair with the same name replaces an earlier one.

    Args:
        cookie_header: Value of the Cookie request header, or None

    Returns:
        Dict of cookie name to percent-decoded value
    """
    cookies: Dict[str, str] = {}
    if not cookie_header:
        return cookies

    for pair in cookie_header.split(";"):
        pair = pair.strip()
        if "=" not in pair:
            continue
        name, value = pair.split("=", 1)
        name = name.strip()
        if not name:
            continue
        cookies[name] = unquote(value.strip())

    return cookies
