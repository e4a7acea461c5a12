from linkdigest.domain.models.bookmark import (
    EXTRACTION_FIELDS,
    SUMMARY_FIELDS,
    Bookmark,
    BookmarkStatus,
    cleared_summary_fields,
)
from linkdigest.domain.models.job import Job, JobStatus

__all__ = [
    "EXTRACTION_FIELDS",
    "SUMMARY_FIELDS",
    "Bookmark",
    "BookmarkStatus",
    "Job",
    "JobStatus",
    "cleared_summary_fields",
]
