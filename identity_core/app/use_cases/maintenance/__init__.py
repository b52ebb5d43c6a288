from .cleanup_expired_use_case import CleanupExpiredUseCase, CleanupReport

__all__ = ["CleanupExpiredUseCase", "CleanupReport"]
