"""Notification dispatcher posting to an external messaging endpoint."""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
import pydantic

from backend.formflow.errors import NotificationDeliveryError, ValidationError
from backend.formflow.models.notifications import (
    NotificationKind,
    NotificationMessage,
    NotificationReceipt,
    RenewalData,
    StatusData,
)
from backend.formflow.utils.metrics import PrometheusLifecycleMetrics

logger = logging.getLogger(__name__)

_PAYLOAD_MODELS: dict[NotificationKind, type[pydantic.BaseModel]] = {
    NotificationKind.renewal: RenewalData,
    NotificationKind.status: StatusData,
}


class NotificationDispatcher:
    """Validates notification input and sends it, once, to the endpoint.

    Retries are the caller's decision: a transport failure surfaces as
    ``NotificationDeliveryError`` and nothing is re-sent automatically.
    """

    def __init__(
        self,
        endpoint_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 4.0,
        metrics: PrometheusLifecycleMetrics | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            endpoint_url: URL accepting ``{to, type, ...}`` envelopes
            client: Optional httpx client (for testing with mocks)
            timeout_seconds: Timeout for clients created per request
            metrics: Metrics sink
        """
        self._endpoint_url = endpoint_url
        self._client = client
        self._timeout_seconds = timeout_seconds
        self._metrics = metrics or PrometheusLifecycleMetrics()

    def build_message(
        self,
        to_email: str,
        kind: NotificationKind | str,
        payload: Mapping[str, Any] | pydantic.BaseModel,
    ) -> NotificationMessage:
        """Validate input and build the wire envelope.

        Raises:
            ValidationError: On a malformed address, unknown kind or payload.
        """
        if not isinstance(to_email, str) or "@" not in to_email:
            raise ValidationError(f"invalid recipient address: {to_email!r}")

        try:
            kind = NotificationKind(kind)
        except ValueError as e:
            raise ValidationError(f"unknown notification kind: {kind!r}") from e

        if isinstance(payload, pydantic.BaseModel):
            payload = payload.model_dump(by_alias=True, exclude_none=True)
        if not isinstance(payload, Mapping):
            raise ValidationError(f"notification payload must be a mapping, got {type(payload).__name__}")

        if kind == NotificationKind.custom:
            subject = payload.get("subject")
            html = payload.get("html") or payload.get("body")
            if not subject or not html:
                raise ValidationError("custom notifications require both subject and body")
            return NotificationMessage(to=to_email, type=kind, subject=subject, html=html)

        try:
            data = _PAYLOAD_MODELS[kind].model_validate(dict(payload))
        except pydantic.ValidationError as e:
            raise ValidationError(f"invalid {kind.value} payload: {e}") from e

        return NotificationMessage(
            to=to_email,
            type=kind,
            data=data.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    async def send(self, message: NotificationMessage) -> NotificationReceipt:
        """Post a validated message to the endpoint.

        Raises:
            NotificationDeliveryError: On network or HTTP errors.
        """
        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout_seconds)
            close_client = True

        try:
            response = await client.post(self._endpoint_url, json=message.to_payload())
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._metrics.inc_notification(message.type.value, "error")
            raise NotificationDeliveryError(
                f"notification to {message.to} failed: {type(e).__name__}: {e}"
            ) from e
        finally:
            if close_client:
                await client.aclose()

        self._metrics.inc_notification(message.type.value, "sent")

        message_id = None
        if response.headers.get("content-type", "").startswith("application/json"):
            try:
                body = response.json()
            except ValueError:
                # Delivered; an unreadable acknowledgement only loses the id
                logger.warning("Unparseable notification response", extra={"structured": {"to": message.to}})
                body = None
            if isinstance(body, dict):
                message_id = body.get("messageId") or body.get("id")

        return NotificationReceipt(
            to=message.to,
            kind=message.type,
            status_code=response.status_code,
            message_id=message_id,
        )

    async def dispatch(
        self,
        to_email: str,
        kind: NotificationKind | str,
        payload: Mapping[str, Any] | pydantic.BaseModel,
    ) -> NotificationReceipt:
        """Validate then send a notification.

        Raises:
            ValidationError: Before any network call, on malformed input.
            NotificationDeliveryError: If the endpoint fails.
        """
        message = self.build_message(to_email, kind, payload)
        return await self.send(message)

    async def send_renewal_reminder(self, to_email: str, data: RenewalData) -> NotificationReceipt:
        return await self.dispatch(to_email, NotificationKind.renewal, data)

    async def send_status_update(self, to_email: str, data: StatusData) -> NotificationReceipt:
        return await self.dispatch(to_email, NotificationKind.status, data)

    async def send_custom_notification(
        self, to_email: str, subject: str, html: str
    ) -> NotificationReceipt:
        return await self.dispatch(
            to_email, NotificationKind.custom, {"subject": subject, "html": html}
        )
