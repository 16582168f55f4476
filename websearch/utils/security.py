import re
from typing import Dict, Iterable

import structlog

logger = structlog.get_logger()

REDACTED = "***"

# Keys whose values are never surfaced by Provider.config()
SECRET_KEY_PATTERN = re.compile(r"(api_?key|token|secret|password)", re.IGNORECASE)

MAX_QUERY_LENGTH = 2000


def redact_config(
    config: Dict[str, str], extra_secret_keys: Iterable[str] = ()
) -> Dict[str, str]:
    """Return a copy of a provider config with credentials masked.

    Any key that looks like a credential, or is listed in
    extra_secret_keys, is replaced with the fixed mask.
    """
    extra = set(extra_secret_keys)
    redacted = {}
    for key, value in config.items():
        if key in extra or SECRET_KEY_PATTERN.search(key):
            redacted[key] = REDACTED
        else:
            redacted[key] = value
    return redacted


class InputValidation:
    """Validation for user-supplied search input"""

    @staticmethod
    def validate_query(query: str) -> str:
        """Validate free-text query for control characters and length.

        Web search queries legitimately contain punctuation and operators
        (site:, quotes, minus), so only unprintable input is rejected.
        """
        v = query.strip()

        if len(v) > MAX_QUERY_LENGTH:
            raise ValueError(f"Query too long (max {MAX_QUERY_LENGTH} characters)")

        if any(ord(c) < 32 and c not in "\t\n\r" for c in v):
            logger.warning("input_validation_failed", reason="control_characters")
            raise ValueError("Query contains invalid control characters")

        return v

    @staticmethod
    def validate_id_list(id_list: str) -> str:
        """Validate a comma-delimited identifier list (arXiv IDs)."""
        ids = [part.strip() for part in id_list.split(",") if part.strip()]
        if not ids:
            raise ValueError("ID list is empty")
        for identifier in ids:
            if not re.match(r"^[\w.\-/]+$", identifier):
                raise ValueError(f"Invalid identifier: {identifier!r}")
        return ",".join(ids)
