"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the messenger's domain apps.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - PermissionDeniedError: Authorization failures

Views (import from core.views):
    - health_check: Database, cache and channel layer health endpoint
"""
