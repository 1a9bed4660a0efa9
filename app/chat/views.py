"""
Views for the chat API.

URL Structure:
    /api/v1/chat/conversation/{peer}/   GET

Real-time sending happens over the WebSocket (see consumers.py); the REST
surface only replays history, which is how an offline recipient picks up
messages sent while no channel was connected.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.serializers import ConversationSerializer, MessageSerializer
from chat.services import ConversationService


class ConversationView(APIView):
    """
    Full message history between the current user and a peer.

    GET /api/v1/chat/conversation/{peer}/

    Messages are ordered by timestamp, ties in insertion order. The peer
    does not need to be a current friend.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Conversation history",
        responses={
            200: ConversationSerializer,
            404: OpenApiResponse(description="Unknown peer"),
        },
        tags=["Chat"],
    )
    def get(self, request, peer: str):
        result = ConversationService.history(request.user, peer)
        if not result.success:
            return Response(
                {"error": result.error, "error_code": result.error_code},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(
            {"messages": MessageSerializer(result.data, many=True).data}
        )
