import logging
import math
from numbers import Real

from glucose_tracker.enums.app_enum import AccessOutcomeEnum, RecordOperationEnum
from glucose_tracker.utils.utils import parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_LEVEL_MIN = 0.1
DEFAULT_LEVEL_MAX = 100.0
DEFAULT_NOTE_MAX_LENGTH = 1000

_OWNER_CHECKED = {
    RecordOperationEnum.read,
    RecordOperationEnum.update,
    RecordOperationEnum.delete,
}


def _finite(value):
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


class AccessDecision:
    def __init__(self, outcome, reason=None):
        self.outcome = outcome
        self.reason = reason

    @property
    def allowed(self):
        return self.outcome == AccessOutcomeEnum.allow

    def __eq__(self, other):
        if not isinstance(other, AccessDecision):
            return NotImplemented
        return self.outcome == other.outcome and self.reason == other.reason

    def __repr__(self):
        return f"AccessDecision({self.outcome.value!r}, {self.reason!r})"


ALLOW = AccessDecision(AccessOutcomeEnum.allow)
NOT_FOUND = AccessDecision(AccessOutcomeEnum.not_found, "record does not exist")


class RecordAccessGuard:
    """
    Per-request authorization for record operations.

    The guard holds no state besides its configured bounds; every call is
    a pure decision over the resolved caller id and, for record-level
    operations, the stored owner id of the target.
    """

    def __init__(self, level_min=DEFAULT_LEVEL_MIN, level_max=DEFAULT_LEVEL_MAX,
                 note_max_length=DEFAULT_NOTE_MAX_LENGTH):
        if level_min > level_max:
            raise ValueError("level_min must not exceed level_max")
        self.level_min = float(level_min)
        self.level_max = float(level_max)
        self.note_max_length = int(note_max_length)

    @classmethod
    def from_config(cls, config):
        return cls(
            level_min=config.get("RECORD_LEVEL_MIN", DEFAULT_LEVEL_MIN),
            level_max=config.get("RECORD_LEVEL_MAX", DEFAULT_LEVEL_MAX),
            note_max_length=config.get("RECORD_NOTE_MAX_LENGTH", DEFAULT_NOTE_MAX_LENGTH),
        )

    def authorize(self, user_id, operation, owner_id=None, record_exists=True):
        if user_id is None:
            raise ValueError("authorize() requires a resolved user id")
        operation = RecordOperationEnum(operation)

        if operation not in _OWNER_CHECKED:
            return ALLOW

        if not record_exists:
            return NOT_FOUND

        if owner_id != user_id:
            logger.warning(
                "User %s denied %s on a record owned by another user",
                user_id, operation.value
            )
            return AccessDecision(AccessOutcomeEnum.deny, "record belongs to another user")

        return ALLOW

    def validate_payload(self, payload):
        """
        Check a create/update body.

        Returns ``(values, errors)``: ``values`` holds ``level``,
        ``measurement_time`` (naive UTC) and ``notes`` when ``errors`` is
        empty; ``errors`` maps field names to messages otherwise.
        """
        if not isinstance(payload, dict):
            return None, {"body": "Request body must be a JSON object"}

        errors = {}

        level = payload.get("level")
        if level is None:
            errors["level"] = "Blood sugar level is required"
        elif isinstance(level, bool) or not isinstance(level, Real):
            errors["level"] = "Blood sugar level must be a number"
        elif not _finite(level):
            errors["level"] = "Blood sugar level must be a finite number"
        elif not (self.level_min <= level <= self.level_max):
            errors["level"] = (
                f"Blood sugar level must be between {self.level_min:g} and {self.level_max:g} mmol/L"
            )

        measurement_time = None
        raw_time = payload.get("measurementTime")
        if raw_time is None:
            errors["measurementTime"] = "Measurement time is required"
        else:
            try:
                measurement_time = parse_timestamp(raw_time)
            except ValueError:
                errors["measurementTime"] = "Measurement time must be a valid ISO-8601 timestamp"

        notes = payload.get("notes")
        if notes is not None:
            if not isinstance(notes, str):
                errors["notes"] = "Notes must be text"
            elif len(notes) > self.note_max_length:
                errors["notes"] = f"Notes cannot exceed {self.note_max_length} characters"
            elif notes == "":
                notes = None

        if errors:
            return None, errors

        return {
            "level": float(level),
            "measurement_time": measurement_time,
            "notes": notes,
        }, {}
