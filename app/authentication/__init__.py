"""
Authentication application.

This app is the identity store the messaging core depends on: user
records, credentials, sessions and the bilateral friend list.

Key components:
    - User model: Username-keyed user with display name and friends
    - IdentityService: Lookup, registration and friendship mutation
    - audit_friendship_symmetry task: Periodic one-sided friendship check

Usage:
    from authentication.models import User
    from authentication.services import IdentityService
"""
