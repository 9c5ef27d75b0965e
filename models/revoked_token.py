"""Bearer tokens invalidated before their expiry (logout)."""
from __future__ import annotations


from database import db, utcnow


class RevokedToken(db.Model):
    __tablename__ = "revoked_tokens"

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(64), unique=True, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    revoked_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<RevokedToken {self.jti}>"

    @classmethod
    def is_revoked(cls, jti: str | None) -> bool:
        if not jti:
            return False
        return cls.query.filter_by(jti=jti).first() is not None
