from glucose_tracker.extensions import db

from sqlalchemy import Enum as SAEnum

from glucose_tracker.enums.app_enum import LanguageEnum
from glucose_tracker.utils.utils import utcnow


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=False, default="")

    # set by whichever sign-in method the account uses
    google_id = db.Column(db.String(255), unique=True, nullable=True)
    password_hash = db.Column(db.String(255), nullable=True)

    language_preference = db.Column(
        SAEnum(LanguageEnum, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
        default=LanguageEnum.en
    )

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    records = db.relationship(
        "BloodSugarRecord",
        back_populates="user",
        cascade="all, delete-orphan"
    )
