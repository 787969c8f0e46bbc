from jobradar.models.company import Company
from jobradar.models.job import Job, JOB_SOURCES
from jobradar.models.saved_job import SavedJob

__all__ = ["Company", "Job", "JOB_SOURCES", "SavedJob"]
