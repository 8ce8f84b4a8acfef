"""
Accounts URL configuration.

All endpoints are mounted under /api/v1/users/ by the root URL config.
"""

from django.urls import path

from .views import LoginView, LogoutView, RefreshTokenView, RegisterView

urlpatterns = [
    path("register/", RegisterView.as_view(), name="users-register"),
    path("login/", LoginView.as_view(), name="users-login"),
    path("logout/", LogoutView.as_view(), name="users-logout"),
    path("refresh-token/", RefreshTokenView.as_view(), name="users-refresh-token"),
]
