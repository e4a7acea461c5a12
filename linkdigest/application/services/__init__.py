from linkdigest.application.services.job_queue import JobQueue
from linkdigest.application.services.quality_report import QualityReportService
from linkdigest.application.services.summarization_service import SummarizationService

__all__ = ["JobQueue", "QualityReportService", "SummarizationService"]
