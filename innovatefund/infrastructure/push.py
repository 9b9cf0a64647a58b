"""Mobile push delivery through Firebase Cloud Messaging."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from typing import Any

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError, InvalidArgumentError

from innovatefund.config import get_settings

logger = logging.getLogger(__name__)

_APP_NAME = "innovatefund"


class PushConfigurationError(RuntimeError):
    """Raised when the Firebase credentials cannot be loaded."""


class PushDeliveryError(RuntimeError):
    """Raised when Firebase rejects a message for a reason other than the token."""


class InvalidPushTokenError(PushDeliveryError):
    """Raised when the device token is invalid or no longer registered."""


def _load_certificate(raw: str) -> credentials.Certificate:
    value = raw.strip()
    try:
        if value.startswith("{"):
            return credentials.Certificate(json.loads(value))
        return credentials.Certificate(value)
    except (ValueError, OSError) as exc:
        raise PushConfigurationError("FIREBASE_SERVICE_ACCOUNT could not be loaded") from exc


class FirebasePushSender:
    """Send notifications to a single device token.

    The Firebase app is initialized lazily on the first send so that processes
    without credentials never touch the SDK.
    """

    def __init__(self, service_account: str | None = None) -> None:
        if service_account is None:
            service_account = get_settings().firebase_service_account
        self._service_account = (service_account or "").strip() or None
        self._app: firebase_admin.App | None = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._service_account is not None

    def _get_app(self) -> firebase_admin.App:
        with self._lock:
            if self._app is not None:
                return self._app
            if self._service_account is None:
                raise PushConfigurationError("FIREBASE_SERVICE_ACCOUNT is not configured")
            try:
                self._app = firebase_admin.get_app(_APP_NAME)
            except ValueError:
                certificate = _load_certificate(self._service_account)
                self._app = firebase_admin.initialize_app(certificate, name=_APP_NAME)
                logger.info("Firebase app initialized for push delivery")
            return self._app

    def send(
        self, *, token: str, title: str, body: str, data: Mapping[str, Any]
    ) -> str:
        """Send the message and return the provider message id."""

        message = messaging.Message(
            notification=messaging.Notification(title=title, body=body),
            data={key: "" if value is None else str(value) for key, value in data.items()},
            token=token,
        )
        try:
            return messaging.send(message, app=self._get_app())
        except (messaging.UnregisteredError, messaging.SenderIdMismatchError) as exc:
            raise InvalidPushTokenError(str(exc)) from exc
        except InvalidArgumentError as exc:
            if "registration token" in str(exc).lower():
                raise InvalidPushTokenError(str(exc)) from exc
            raise PushDeliveryError(str(exc)) from exc
        except FirebaseError as exc:
            raise PushDeliveryError(str(exc)) from exc


__all__ = [
    "FirebasePushSender",
    "InvalidPushTokenError",
    "PushConfigurationError",
    "PushDeliveryError",
]
