"""
Link targets for rendered resumes.

Profile URLs are user text. Anything that is not already http(s) gets an
https:// prefix, so schemes such as javascript: never become live links, and
characters outside the URL-safe set are percent-encoded. The result still has
to be escaped for the output format (HTML attribute or LaTeX \\href).
"""
import re
from urllib.parse import quote

HTTP_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

URL_SAFE = ":/?#@!&()*+,;=%.-_~"
EMAIL_SAFE = "@.+-_"


def format_url(value) -> str:
    """Normalize a profile link to an https URL with no unsafe characters."""
    value = str(value or "").strip()
    if not value:
        return ""
    if not HTTP_SCHEME_RE.match(value):
        value = f"https://{value.lstrip('/')}"
    return quote(value, safe=URL_SAFE)


def mailto_url(email) -> str:
    email = str(email or "").strip()
    return f"mailto:{quote(email, safe=EMAIL_SAFE)}" if email else ""
