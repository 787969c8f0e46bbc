"""
Job Model - SQLAlchemy ORM model for ingested job postings

Rows are created once per unique job_hash by the ingestion pipeline (or the
manual create endpoint) and are never updated in place afterwards. The
housekeeping sweep deletes rows older than the retention window.

Source tags:
    ats_api          - fetched through a vendor ATS API
    company_website  - rendered career page + LLM extraction
    manual           - pasted through the jobs API
"""

from sqlalchemy import Column, String, Text, DateTime, JSON
from jobradar.database import Base, utcnow
import uuid

JOB_SOURCES = ("ats_api", "company_website", "manual")


class Job(Base):
    """
    Structured job posting.

    Attributes:
        id: UUID primary key
        job_hash: 16-char dedup key (unique constraint backs at-most-once ingestion)
        raw_jd: Source text the structured fields were parsed from
        parsed_jd: JSON {role, minExperience, maxExperience, skills, location, employmentType}
        embedding: Vector built from parsed_jd (JSON array, nullable until embedded)
        company_name: Denormalized company name (not a foreign key)
        apply_url: Where to apply
        source: Ingestion path tag
    """

    __tablename__ = "jobs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    job_hash = Column(String(16), nullable=False, unique=True, index=True)
    raw_jd = Column(Text, nullable=False, default="")
    parsed_jd = Column(JSON, nullable=False, default=dict)
    embedding = Column(JSON(none_as_null=True), nullable=True)
    company_name = Column(String(500), nullable=False, default="", index=True)
    apply_url = Column(String(2000), nullable=False, default="")
    source = Column(String(50), nullable=False, default="company_website", index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
