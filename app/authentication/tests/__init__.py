"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: User and friendship helpers
- test_managers.py: UserManager
- test_services.py: IdentityService
- test_views.py: Account, search and friend API endpoints
- test_tasks.py: Friendship symmetry audit task
- test_commands.py: repair_friendships command

Usage:
    pytest app/authentication/tests/
    pytest app/authentication/tests/test_services.py
"""
