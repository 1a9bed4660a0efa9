"""
Chat app for real-time direct messaging between friends.

This app handles:
- Authenticated WebSocket connections (consumers.py, routing.py)
- Presence of live channels per user (presence.py)
- Send-time friendship checks and persistence (services.py)
- The delivery state machine and fan-out (delivery.py)
- Conversation history over REST (views.py)

Related apps:
    - authentication: User model, friendships, identity lookups

Usage:
    from chat.delivery import delivery_pipeline

    outcome = await delivery_pipeline.send(
        sender_username="alice",
        origin_channel=channel_name,
        to="bob",
        text="hi",
    )
"""
