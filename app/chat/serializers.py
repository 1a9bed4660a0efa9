"""
Serializers for the chat API.

MessageSerializer renders a persisted Message in its wire form, the same
shape pushed over the WebSocket in ``message-delivered`` frames:

    {"id": "<uuid>", "from": "alice", "to": "bob", "text": "hi",
     "timestamp": 1700000000000}
"""

from rest_framework import serializers

from chat.models import Message


class MessageSerializer(serializers.ModelSerializer):
    """Read-only wire representation of a Message."""

    class Meta:
        model = Message
        fields = ["uuid", "sender", "recipient", "text", "sent_at"]
        read_only_fields = fields

    def to_representation(self, instance):
        # "from" is a keyword, so the wire keys cannot be declared as fields
        return instance.to_wire()


class ConversationSerializer(serializers.Serializer):
    """Envelope for conversation history."""

    messages = MessageSerializer(many=True, read_only=True)
