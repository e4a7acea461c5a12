from linkdigest.domain.exceptions.domain_exceptions import (
    ContentFetchError,
    DomainException,
    InvalidStateTransitionError,
    NoProviderConfiguredError,
    ProviderUnavailableError,
    ResourceNotFoundError,
    SummaryGenerationError,
)

__all__ = [
    "ContentFetchError",
    "DomainException",
    "InvalidStateTransitionError",
    "NoProviderConfiguredError",
    "ProviderUnavailableError",
    "ResourceNotFoundError",
    "SummaryGenerationError",
]
