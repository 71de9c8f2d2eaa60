from haven.services.inquiry.admission_query_service import AdmissionQueryService

__all__ = ["AdmissionQueryService"]
