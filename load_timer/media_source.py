# load_timer/media_source.py
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import parse_qs, urlparse


_EMBED_RE = re.compile(r"/embed/([^/]+)")
_SHORT_HOSTS = {"youtu.be", "www.youtu.be"}


def is_probably_url(s: str) -> bool:
    try:
        p = urlparse((s or "").strip())
        return p.scheme in ("http", "https") and bool(p.netloc)
    except ValueError:
        return False


def extract_video_id(url: str) -> Optional[str]:
    """
    YouTube video id from a watch/short/embed URL, or None.

      https://youtu.be/<id>
      https://www.youtube.com/watch?v=<id>
      https://www.youtube.com/embed/<id>
    """
    if not is_probably_url(url):
        return None
    p = urlparse(url.strip())

    if (p.hostname or "").lower() in _SHORT_HOSTS:
        vid = p.path.lstrip("/").split("/")[0]
        return vid or None

    v = parse_qs(p.query).get("v")
    if v and v[0]:
        return v[0]

    m = _EMBED_RE.search(p.path)
    if m:
        return m.group(1)

    return None
