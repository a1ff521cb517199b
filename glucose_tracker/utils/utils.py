from datetime import datetime, timezone


def utcnow():
    """Current time as a naive UTC datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value):
    """
    Parse an ISO-8601 timestamp into a naive UTC datetime.

    Offsets are converted to UTC; a timestamp without an offset is taken
    to already be UTC. Raises ValueError for anything that is not a
    string holding a valid timestamp.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("timestamp must be a non-empty ISO-8601 string")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError as e:
            raise ValueError("timestamp is outside the supported range") from e
    return parsed


def to_utc_iso(value):
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).isoformat()
