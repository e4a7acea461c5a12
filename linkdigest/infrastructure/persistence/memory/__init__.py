from linkdigest.infrastructure.persistence.memory.bookmark_store import InMemoryBookmarkStore
from linkdigest.infrastructure.persistence.memory.job_store import InMemoryJobStore

__all__ = ["InMemoryBookmarkStore", "InMemoryJobStore"]
