from sqlalchemy import Column, String, Text, DateTime, UniqueConstraint
from jobradar.database import Base, utcnow
import uuid


class SavedJob(Base):
    """
    A job bookmarked by a user.

    job_id is a plain string reference: jobs may be deleted by the cleanup
    sweep, so readers must tolerate a saved job whose job no longer exists.
    """

    __tablename__ = "saved_jobs"
    __table_args__ = (UniqueConstraint("user_id", "job_id", name="uq_saved_jobs_user_job"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(200), nullable=False, index=True)
    job_id = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
