"""
Platform detection from submitted URLs
"""

import re
from urllib.parse import urlparse

# Host suffix -> platform
PLATFORM_HOSTS: dict[str, str] = {
    "instagram.com": "Instagram",
    "instagr.am": "Instagram",
    "twitter.com": "Twitter",
    "x.com": "Twitter",
    "t.co": "Twitter",
    "facebook.com": "Facebook",
    "fb.com": "Facebook",
    "fb.watch": "Facebook",
    "tiktok.com": "TikTok",
    "youtube.com": "YouTube",
    "youtu.be": "YouTube",
}


def extract_host(url: str) -> str:
    """Extract lowercase host from a URL, with or without a scheme"""
    text = url.strip().lower()
    if not re.match(r"^[a-z][a-z0-9+.\-]*://", text):
        text = f"//{text}"
    parsed = urlparse(text)
    host = parsed.hostname or ""
    if host.startswith("www."):
        host = host[4:]
    return host


def detect_platform(url: str) -> str | None:
    """
    Map a URL to its social platform.

    Returns:
        Platform name, or None when the host is not a known platform
    """
    host = extract_host(url)
    if not host:
        return None
    for suffix, platform in PLATFORM_HOSTS.items():
        if host == suffix or host.endswith(f".{suffix}"):
            return platform
    return None
