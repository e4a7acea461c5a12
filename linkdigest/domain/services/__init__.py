from linkdigest.domain.services.quality_assessor import (
    ResponseQualityAssessor,
    assess_response_quality,
)
from linkdigest.domain.services.quality_rules import DEFAULT_RULES, QualityRule, QualityThresholds

__all__ = [
    "DEFAULT_RULES",
    "QualityRule",
    "QualityThresholds",
    "ResponseQualityAssessor",
    "assess_response_quality",
]
