"""
Identity views.

This module provides the REST endpoints around the messaging core:
- Registration, login, logout and current identity
- User search
- Friend list and bilateral friendship mutation

Related files:
    - serializers.py: Request/response serialization
    - services.py: IdentityService
    - urls.py: URL routing

Sessions:
    Login and registration establish a Django session (cookie) and also
    return a JWT pair. Either one authenticates the real-time connection:
    the cookie through Channels' AuthMiddlewareStack, the access token via
    ``?token=`` on the WebSocket URL.
"""

from django.contrib.auth import login, logout
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.serializers import (
    FriendRequestSerializer,
    LoginSerializer,
    RegisterSerializer,
    UserSerializer,
)
from authentication.services import IdentityService


def _session_payload(request, user) -> dict:
    """Log the user into the session and build the token response body."""
    login(request, user, backend="django.contrib.auth.backends.ModelBackend")
    refresh = RefreshToken.for_user(user)
    return {
        "ok": True,
        "user": UserSerializer(user).data,
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


# =============================================================================
# Account Views
# =============================================================================


class RegisterView(APIView):
    """
    Register a new account.

    POST /api/v1/auth/register/
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Register",
        request=RegisterSerializer,
        responses={
            201: OpenApiResponse(description="Account created, session established"),
            400: OpenApiResponse(description="Missing fields or username taken"),
        },
        tags=["Auth"],
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "username/password required", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = IdentityService.register(
            username=serializer.validated_data["username"],
            password=serializer.validated_data["password"],
            display_name=serializer.validated_data.get("display_name", ""),
        )
        if not result.success:
            return Response(
                {"error": result.error, "error_code": result.error_code},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(
            _session_payload(request, result.data), status=status.HTTP_201_CREATED
        )


class LoginView(APIView):
    """
    Log in with username and password.

    POST /api/v1/auth/login/
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Log in",
        request=LoginSerializer,
        responses={
            200: OpenApiResponse(description="Session established, JWT pair returned"),
            400: OpenApiResponse(description="Invalid credentials"),
        },
        tags=["Auth"],
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": "invalid"}, status=status.HTTP_400_BAD_REQUEST)

        result = IdentityService.check_credentials(
            serializer.validated_data["username"],
            serializer.validated_data["password"],
            request=request,
        )
        if not result.success:
            return Response(
                {"error": result.error, "error_code": result.error_code},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(_session_payload(request, result.data))


class LogoutView(APIView):
    """
    End the current session.

    POST /api/v1/auth/logout/
    """

    permission_classes = [AllowAny]

    @extend_schema(summary="Log out", request=None, tags=["Auth"])
    def post(self, request):
        logout(request)
        return Response({"ok": True})


class MeView(APIView):
    """
    Return the current identity, or null when anonymous.

    GET /api/v1/auth/me/
    """

    permission_classes = [AllowAny]

    @extend_schema(summary="Current user", tags=["Auth"])
    def get(self, request):
        user = request.user
        if not user or not user.is_authenticated:
            return Response({"user": None})
        return Response({"user": UserSerializer(user).data})


# =============================================================================
# Directory and Friendship Views
# =============================================================================


class UserSearchView(APIView):
    """
    Search users by username or display name substring.

    GET /api/v1/users/search/?q=<query>
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Search users",
        parameters=[OpenApiParameter("q", str, description="Substring to match")],
        tags=["Users"],
    )
    def get(self, request):
        query = request.query_params.get("q", "")
        users = IdentityService.search(query)
        return Response({"results": UserSerializer(users, many=True).data})


class FriendListView(APIView):
    """
    List the current user's friends.

    GET /api/v1/friends/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="List friends", tags=["Friends"])
    def get(self, request):
        usernames = IdentityService.friend_usernames(request.user)
        return Response({"friends": [{"username": name} for name in usernames]})


class _FriendMutationView(APIView):
    permission_classes = [IsAuthenticated]

    def mutate(self, user, username):
        raise NotImplementedError

    def post(self, request):
        serializer = FriendRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.mutate(request.user, serializer.validated_data["username"])
        if not result.success:
            status_code = (
                status.HTTP_404_NOT_FOUND
                if result.error_code == "USER_NOT_FOUND"
                else status.HTTP_400_BAD_REQUEST
            )
            return Response(
                {"error": result.error, "error_code": result.error_code},
                status=status_code,
            )

        return Response({"ok": True, "friends": result.data})


class FriendAddView(_FriendMutationView):
    """
    Befriend another user in both directions.

    POST /api/v1/friends/add/
    """

    def mutate(self, user, username):
        return IdentityService.add_bidirectional(user, username)

    @extend_schema(
        summary="Add friend",
        request=FriendRequestSerializer,
        responses={
            200: OpenApiResponse(description="Friendship established"),
            404: OpenApiResponse(description="Unknown user"),
        },
        tags=["Friends"],
    )
    def post(self, request):
        return super().post(request)


class FriendRemoveView(_FriendMutationView):
    """
    Remove a friendship in both directions. History is kept.

    POST /api/v1/friends/remove/
    """

    def mutate(self, user, username):
        return IdentityService.remove_bidirectional(user, username)

    @extend_schema(
        summary="Remove friend",
        request=FriendRequestSerializer,
        tags=["Friends"],
    )
    def post(self, request):
        return super().post(request)
