from glucose_tracker.utils.utils import to_utc_iso


def record_to_dict(record):
    return {
        "id": record.id,
        "level": record.level,
        "measurementTime": to_utc_iso(record.measurement_time),
        "notes": record.notes,
        "userId": record.user_id,
        "createdAt": to_utc_iso(record.created_at),
    }


def user_to_dict(user):
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "createdAt": to_utc_iso(user.created_at),
        "languagePreference": user.language_preference.value
        if user.language_preference is not None else None,
    }
