"""
Users — Auth URL Configuration

JWT token pair endpoints. The ledger only ever sees the user resolved by
these tokens, never an identity asserted in a request body.

@file users/urls.py
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

app_name = 'auth'

urlpatterns = [
    path('token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
]
