"""
URL configuration for the identity endpoints.

URL structure (prefixed with /api/v1/ in config/urls.py):
    auth/register/      - Create account and session (POST)
    auth/login/         - Log in (POST)
    auth/logout/        - Log out (POST)
    auth/me/            - Current identity (GET)
    users/search/       - Search users (GET ?q=)
    friends/            - Friend list (GET)
    friends/add/        - Add friend in both directions (POST)
    friends/remove/     - Remove friend in both directions (POST)
"""

from django.urls import path

from authentication.views import (
    FriendAddView,
    FriendListView,
    FriendRemoveView,
    LoginView,
    LogoutView,
    MeView,
    RegisterView,
    UserSearchView,
)

app_name = "authentication"

urlpatterns = [
    # Accounts
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/me/", MeView.as_view(), name="me"),
    # Directory
    path("users/search/", UserSearchView.as_view(), name="user-search"),
    # Friendship
    path("friends/", FriendListView.as_view(), name="friend-list"),
    path("friends/add/", FriendAddView.as_view(), name="friend-add"),
    path("friends/remove/", FriendRemoveView.as_view(), name="friend-remove"),
]
