# glucose_tracker/services/record_service.py
import logging

from glucose_tracker.enums.app_enum import RecordOperationEnum
from glucose_tracker.errors import record_not_found, validation_error
from glucose_tracker.extensions import db
from glucose_tracker.models.blood_sugar_record import BloodSugarRecord

logger = logging.getLogger(__name__)


class RecordService:
    """
    Owner-scoped CRUD over blood sugar records.

    Every method takes the resolved caller id and the configured
    ``RecordAccessGuard``; a record owned by someone else is reported
    exactly like a record that does not exist.
    """

    @staticmethod
    def list_records(guard, user_id: int):
        guard.authorize(user_id, RecordOperationEnum.read_list)
        return (
            BloodSugarRecord.query
            .filter_by(user_id=user_id)
            .order_by(BloodSugarRecord.measurement_time.desc(), BloodSugarRecord.id.desc())
            .all()
        )

    @staticmethod
    def _load_for(guard, user_id: int, record_id: int, operation):
        record = db.session.get(BloodSugarRecord, record_id)
        decision = guard.authorize(
            user_id,
            operation,
            owner_id=record.user_id if record else None,
            record_exists=record is not None
        )
        if not decision.allowed:
            return None, record_not_found()
        return record, None

    @staticmethod
    def get_record(guard, user_id: int, record_id: int):
        return RecordService._load_for(guard, user_id, record_id, RecordOperationEnum.read)

    @staticmethod
    def create_record(guard, user_id: int, payload):
        guard.authorize(user_id, RecordOperationEnum.create)
        values, errors = guard.validate_payload(payload)
        if errors:
            return None, validation_error(errors)

        record = BloodSugarRecord(
            user_id=user_id,
            level=values["level"],
            measurement_time=values["measurement_time"],
            notes=values["notes"]
        )
        db.session.add(record)
        db.session.commit()

        logger.info("User %s created record %s", user_id, record.id)
        return record, None

    @staticmethod
    def update_record(guard, user_id: int, record_id: int, payload):
        record, error = RecordService._load_for(guard, user_id, record_id, RecordOperationEnum.update)
        if error:
            return None, error

        values, errors = guard.validate_payload(payload)
        if errors:
            return None, validation_error(errors)

        record.level = values["level"]
        record.measurement_time = values["measurement_time"]
        record.notes = values["notes"]
        db.session.commit()

        logger.info("User %s updated record %s", user_id, record.id)
        return record, None

    @staticmethod
    def delete_record(guard, user_id: int, record_id: int):
        record, error = RecordService._load_for(guard, user_id, record_id, RecordOperationEnum.delete)
        if error:
            return False, error

        db.session.delete(record)
        db.session.commit()

        logger.info("User %s deleted record %s", user_id, record_id)
        return True, None
