from glucose_tracker.extensions import db
from glucose_tracker.utils.utils import utcnow


class RevokedToken(db.Model):
    __tablename__ = "revoked_tokens"

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(64), nullable=False, unique=True, index=True)

    # access | refresh
    token_type = db.Column(db.String(16), nullable=False)
    user_id = db.Column(db.Integer, nullable=True)
    expires_at = db.Column(db.DateTime, nullable=True)

    revoked_at = db.Column(db.DateTime, default=utcnow, nullable=False)
