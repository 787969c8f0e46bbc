"""
Job Normalization & Hashing

Collapses parsed job fields into a canonical form and derives the 16-char
dedup key stored in jobs.job_hash.

Hash recipe (must stay bit-for-bit stable, existing rows depend on it):
    clean = apply_url up to the first "?", leading "scheme://" or "//" removed,
            lowercased, one trailing "/" removed
    data  = f"{company}:{role}:{location}:{clean}" with each part lowercased
    hash  = sha256(data) hex digest, first 16 chars

The role and location fed into the hash are the normalized ones, so a
posting's hash changes if the bucketing rules below change.
"""

import hashlib
import re
from typing import List, Optional

from jobradar.schemas import NormalizedJob, ParsedJobDescription

# Ordered: the first bucket with a matching keyword wins. Keywords are plain
# substrings, so "html" lands in Data Scientist and "development" in Product
# Manager; existing hashes depend on that.
ROLE_BUCKETS = [
    ("Frontend Engineer", ["frontend", "front-end", "front end"]),
    ("Backend Engineer", ["backend", "back-end", "back end"]),
    ("Full Stack Engineer", ["fullstack", "full-stack", "full stack"]),
    ("DevOps Engineer", ["devops", "sre", "reliability"]),
    ("Data Scientist", ["data scientist", "ml", "machine learning"]),
    ("Product Manager", ["product manager", "pm"]),
    ("Software Engineer", ["sde", "software engineer", "developer"]),
]

REMOTE_MARKERS = ("remote", "wfh", "anywhere")

_WORD_START = re.compile(r"\b\w", re.ASCII)
_URL_SCHEME = re.compile(r"^(\w+:)?//")


def title_case(text: str) -> str:
    """Upper-case the first letter of every word, leave the rest untouched."""
    return _WORD_START.sub(lambda m: m.group(0).upper(), text)


def normalize_role(role: str) -> str:
    lower = role.lower()
    for bucket, keywords in ROLE_BUCKETS:
        if any(keyword in lower for keyword in keywords):
            return bucket
    return title_case(role)


def dedupe_skills(skills: List[str]) -> List[str]:
    seen = set()
    unique = []
    for skill in skills:
        trimmed = skill.strip()
        key = trimmed.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(trimmed)
    return unique


def normalize_location(location: Optional[str]) -> str:
    if not location:
        return "Remote"
    lower = location.lower()
    if any(marker in lower for marker in REMOTE_MARKERS):
        return "Remote"
    return title_case(location)


def clean_url(url: str) -> str:
    clean = url.split("?")[0]
    clean = _URL_SCHEME.sub("", clean, count=1).lower()
    if clean.endswith("/"):
        clean = clean[:-1]
    return clean


def generate_job_hash(company: str, role: str, location: str, url: str) -> str:
    data = f"{company.lower()}:{role.lower()}:{location.lower()}:{clean_url(url)}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()[:16]


def normalize(
    company_name: str,
    parsed: ParsedJobDescription,
    apply_url: str,
    fetched_location: Optional[str] = None,
) -> NormalizedJob:
    role = normalize_role(parsed.role)
    skills = dedupe_skills(parsed.skills)
    location = normalize_location(parsed.location or fetched_location)

    return NormalizedJob(
        role=role,
        skills=skills,
        location=location,
        job_hash=generate_job_hash(company_name, role, location, apply_url),
    )
