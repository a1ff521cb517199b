from glucose_tracker.extensions import db
from glucose_tracker.utils.utils import utcnow


class BloodSugarRecord(db.Model):
    __tablename__ = "blood_sugar_records"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # mmol/L, stored as double precision
    level = db.Column(db.Float(precision=53), nullable=False)
    # naive UTC
    measurement_time = db.Column(db.DateTime, nullable=False, index=True)
    notes = db.Column(db.String(1000), nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    user = db.relationship("User", back_populates="records")
