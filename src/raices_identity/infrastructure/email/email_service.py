import html
import logging

import httpx

from raices_config.settings import Settings
from raices_identity.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)

PASSWORD_RESET_SUBJECT = "Código de recuperación de contraseña - RaícesMX"

PASSWORD_RESET_TEXT = """Hola {user_name},

Recibimos una solicitud para restablecer la contraseña de tu cuenta de RaícesMX.

Tu código de recuperación es: {code}

Este código expira en {expiry_minutes} minutos y solo puede usarse una vez.

Si no solicitaste este cambio, puedes ignorar este correo.

-- RaícesMX
"""

PASSWORD_RESET_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px; box-shadow: 0 1px 3px rgba(0,0,0,0.1);">
        <h2 style="color: #111827; margin-top: 0;">Recuperación de contraseña</h2>
        <p style="color: #374151; line-height: 1.6;">Hola {user_name},</p>
        <p style="color: #374151; line-height: 1.6;">Recibimos una solicitud para restablecer la contraseña de tu cuenta de RaícesMX. Usa este código:</p>
        <p style="margin: 30px 0; text-align: center;">
            <span style="display: inline-block; padding: 14px 28px; background-color: #f3f4f6; color: #111827; border-radius: 6px; font-weight: 700; font-size: 28px; letter-spacing: 8px;">{code}</span>
        </p>
        <p style="color: #6b7280; font-size: 14px;">Este código expira en {expiry_minutes} minutos y solo puede usarse una vez.</p>
        <div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
            <p style="color: #9ca3af; font-size: 13px; margin: 0;">Si no solicitaste este cambio, puedes ignorar este correo.</p>
            <p style="color: #9ca3af; font-size: 13px; margin-top: 8px;">RaícesMX</p>
        </div>
    </div>
</body>
</html>
"""


class EmailService:
    """Sends transactional email through the Brevo HTTP API."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    def _build_payload(
        self,
        to_email: str,
        to_name: str,
        subject: str,
        text_body: str,
        html_body: str,
    ) -> dict:
        return {
            "sender": {
                "name": self._settings.brevo_from_name,
                "email": self._settings.brevo_from_email,
            },
            "to": [{"email": to_email, "name": to_name}],
            "subject": subject,
            "textContent": text_body,
            "htmlContent": html_body,
        }

    async def _send_email(self, to_email: str, payload: dict) -> None:
        headers = {
            "api-key": self._settings.brevo_api_key.get_secret_value(),
            "accept": "application/json",
            "content-type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.brevo_timeout_seconds,
                transport=self._transport,
            ) as client:
                resp = await client.post(
                    self._settings.brevo_api_url,
                    json=payload,
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error("Failed to reach email provider for %s: %s", to_email, e)
            raise EmailDeliveryError(details={"reason": type(e).__name__}) from e

        if not resp.is_success:
            logger.error(
                "Email provider rejected message to %s: %s %s",
                to_email,
                resp.status_code,
                resp.text[:200],
            )
            raise EmailDeliveryError(details={"status_code": resp.status_code})

        logger.info("Email sent to %s", to_email)

    async def send_password_reset_code(
        self,
        to_email: str,
        code: str,
        user_name: str,
    ) -> None:
        """Deliver a reset code to the user.

        Raises
        ------
        EmailDeliveryError
            If the provider cannot be reached or answers with a non-2xx status
        """
        expiry_minutes = self._settings.reset_code_expire_minutes

        text_body = PASSWORD_RESET_TEXT.format(
            user_name=user_name,
            code=code,
            expiry_minutes=expiry_minutes,
        )
        html_body = PASSWORD_RESET_HTML.format(
            user_name=html.escape(user_name),
            code=html.escape(code),
            expiry_minutes=expiry_minutes,
        )

        payload = self._build_payload(
            to_email=to_email,
            to_name=user_name,
            subject=PASSWORD_RESET_SUBJECT,
            text_body=text_body,
            html_body=html_body,
        )

        await self._send_email(to_email, payload)
