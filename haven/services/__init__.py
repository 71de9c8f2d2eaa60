"""
Service layer.

Each service wraps one workflow and reports outcomes as ``ServiceResult``.
"""
