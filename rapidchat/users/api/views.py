from __future__ import annotations

from typing import Any

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from rapidchat.users import credentials
from rapidchat.users import sessions
from rapidchat.users.exceptions import CredentialError

from .serializers import ErrorSerializer
from .serializers import LoginSerializer
from .serializers import RegisteredSerializer
from .serializers import RegisterSerializer
from .serializers import SessionSerializer
from .serializers import TokenSerializer


def _first_error(errors: Any) -> str:
    """Flatten DRF's nested error structure down to its first message."""
    if isinstance(errors, dict):
        for value in errors.values():
            return _first_error(value)
    if isinstance(errors, list) and errors:
        return _first_error(errors[0])
    return str(errors)


def _error(message: str) -> Response:
    return Response({"messageError": message}, status=status.HTTP_400_BAD_REQUEST)


class PublicAPIView(APIView):
    """Token-in-body endpoints: no header auth, no session/CSRF."""

    authentication_classes: list = []
    permission_classes = [AllowAny]


class RegisterView(PublicAPIView):
    @extend_schema(
        request=RegisterSerializer,
        responses={201: RegisteredSerializer, 400: ErrorSerializer},
    )
    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return _error(_first_error(serializer.errors))
        data = serializer.validated_data
        try:
            user = credentials.register(data["email"], data["password"], data["name"])
        except CredentialError as exc:
            return _error(exc.message)
        return Response(
            {"message": "User registered successfully", "name": user.name},
            status=status.HTTP_201_CREATED,
        )


class LoginView(PublicAPIView):
    @extend_schema(
        request=LoginSerializer,
        responses={200: SessionSerializer, 400: ErrorSerializer},
    )
    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return _error(_first_error(serializer.errors))
        data = serializer.validated_data
        try:
            issued = sessions.login(data["email"], data["password"])
        except CredentialError as exc:
            return _error(exc.message)
        return Response({"token": issued.token, "name": issued.display_name})


class ProfileView(PublicAPIView):
    @extend_schema(
        request=TokenSerializer,
        responses={200: SessionSerializer, 204: None},
    )
    def post(self, request, *args, **kwargs):
        serializer = TokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        issued = sessions.profile(serializer.validated_data["token"])
        if issued is None:
            # Unknown tokens are not an error here, the client just gets nothing.
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response({"token": issued.token, "name": issued.display_name})


class LogoutView(PublicAPIView):
    @extend_schema(request=TokenSerializer, responses={204: None})
    def post(self, request, *args, **kwargs):
        serializer = TokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sessions.revoke(serializer.validated_data["token"])
        return Response(status=status.HTTP_204_NO_CONTENT)
