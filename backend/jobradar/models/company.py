"""
Company Model - companies whose career pages are crawled for jobs

career_page_url and ats_type are discovered lazily on the first ingestion
attempt and cached; once career_page_url is set it is trusted until someone
clears it by hand. last_checked_at is stamped after every attempt.
"""

from sqlalchemy import Column, String, DateTime, Index, func
from jobradar.database import Base, utcnow
import uuid


class Company(Base):
    __tablename__ = "companies"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(500), nullable=False)
    homepage_url = Column(String(2000), nullable=False)
    career_page_url = Column(String(2000), nullable=True)
    ats_type = Column(String(32), nullable=True)
    last_checked_at = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


# Names are unique regardless of casing
Index("uq_companies_name_lower", func.lower(Company.name), unique=True)
