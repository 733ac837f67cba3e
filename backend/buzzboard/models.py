from buzzboard import db
import time


class StoredSession(db.Model):
    """One row per live session; ``payload`` holds the JSON session record."""
    __tablename__ = 'buzz_session'
    session_id = db.Column(db.String(32), primary_key=True)
    payload = db.Column(db.Text, nullable=False)
    # Epoch seconds; rows past this are invisible to readers and purged later
    expires_at = db.Column(db.Float, nullable=False, index=True)
    updated_at = db.Column(db.Float, nullable=False, default=time.time)

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now
