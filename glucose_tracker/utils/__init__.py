from .utils import utcnow, parse_timestamp, to_utc_iso
