"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Message model and wire form
- test_presence.py, test_authenticator.py, test_middleware.py: connection binding
- test_services.py: FriendshipGate, MessageStore, ConversationService
- test_delivery.py: DeliveryPipeline
- test_consumers.py: WebSocket consumer, end to end
- test_views.py: Conversation history endpoint
- test_commands.py: import_legacy_data command

Usage:
    pytest app/chat/tests/
    pytest app/chat/tests/test_consumers.py
"""
