"""
Domain errors shared by services and mapped to HTTP statuses in main.py.

Discovery and ingestion code never lets UpstreamFailure escape past the
company being processed; it is raised by the collaborator wrappers and
caught by the orchestrators.
"""


class JobRadarError(Exception):
    """Base class for all domain errors."""


class NotFoundError(JobRadarError):
    """A requested company, job, candidate or saved job does not exist."""


class ConflictError(JobRadarError):
    """A unique key (job hash, user + job) is already taken."""


class UpstreamFailure(JobRadarError):
    """An external collaborator (HTTP, renderer, LLM) failed or returned garbage."""


class ValidationFailure(JobRadarError):
    """Required input is missing at a collaborator boundary."""
