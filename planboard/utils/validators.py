from datetime import datetime, timezone
from typing import Dict, Any, Optional
from urllib.parse import urlparse
import re

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
MAX_SLUG_LENGTH = 50
_SLASHES = re.compile(r"/+")


def normalize_path(path: Optional[str]) -> str:
    """Canonical form used for path lookups, stored slugs and ingested slugs.

    Query string and fragment are dropped, surrounding whitespace and
    slashes are stripped, repeated slashes collapse, and the result is
    lower-cased. The root path normalizes to "".
    """
    if not path:
        return ""
    text = str(path).split("#", 1)[0].split("?", 1)[0].strip()
    text = _SLASHES.sub("/", text).strip("/")
    return text.lower()


class Validators:
    """Input validation utilities"""

    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format"""
        return bool(email) and bool(EMAIL_PATTERN.match(email))

    @staticmethod
    def validate_slug(slug: str) -> bool:
        """Lower-case letters and digits, single hyphens between groups"""
        if not slug or len(slug) > MAX_SLUG_LENGTH:
            return False
        return bool(SLUG_PATTERN.match(slug))

    @staticmethod
    def validate_url(url: str) -> bool:
        """Absolute http(s) URL with a host"""
        if not url or not isinstance(url, str):
            return False
        try:
            parsed = urlparse(url.strip())
        except ValueError:
            return False
        return parsed.scheme in ('http', 'https') and bool(parsed.netloc)

    @staticmethod
    def validate_name(name: str, max_length: int = 100) -> bool:
        return bool(name) and 1 <= len(name.strip()) <= max_length


class Helpers:
    """Utility helper functions"""

    @staticmethod
    def now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def parse_timestamp(timestamp_str: Any) -> Optional[datetime]:
        """Parse an ISO string (or date-only string) to an aware UTC datetime"""
        if isinstance(timestamp_str, datetime):
            value = timestamp_str
        else:
            try:
                text = str(timestamp_str).strip()
                if text.endswith('Z'):
                    text = text[:-1] + '+00:00'
                value = datetime.fromisoformat(text)
            except (ValueError, TypeError):
                return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    @staticmethod
    def sanitize_string(text: Any) -> str:
        """Sanitize string input"""
        if not text:
            return ""
        return str(text).strip()

    @staticmethod
    def build_error_response(message: str, code: str = "ERROR", details: Any = None) -> Dict[str, Any]:
        """Build standardized error response"""
        response = {
            'error': message,
            'code': code,
            'timestamp': Helpers.now_iso()
        }
        if details is not None:
            response['details'] = details
        return response
