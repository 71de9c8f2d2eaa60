from haven.services.notice.notice_service import NoticeService

__all__ = ["NoticeService"]
