"""
AWS SES Email Service for sending one-time codes.

Handles email formatting and AWS SES integration. One instance is built at
application startup and handed to the flows; nothing here is module-global.
"""

import logging
from typing import Optional
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from app.core.config import Settings, settings as default_settings
from app.core.codes import expiry_statement

logger = logging.getLogger(__name__)


class EmailService:
    """
    Service for sending code emails via AWS SES.

    Every send method returns True once SES has accepted the message and
    False on any delivery error; errors are logged, never raised.
    """

    def __init__(self, config: Optional[Settings] = None, ses_client=None):
        """Initialize AWS SES client"""
        self.config = config or default_settings

        if ses_client is None:
            session_kwargs = {
                'region_name': self.config.AWS_REGION,
            }

            # Add credentials if provided (otherwise uses IAM role)
            if self.config.AWS_ACCESS_KEY_ID and self.config.AWS_SECRET_ACCESS_KEY:
                session_kwargs['aws_access_key_id'] = self.config.AWS_ACCESS_KEY_ID
                session_kwargs['aws_secret_access_key'] = self.config.AWS_SECRET_ACCESS_KEY

            ses_client = boto3.client('ses', **session_kwargs)

        self.ses_client = ses_client

    @property
    def sender(self) -> str:
        return f"{self.config.AWS_SES_FROM_NAME} <{self.config.AWS_SES_FROM_EMAIL}>"

    def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """
        Send one email.

        Args:
            to_email: Recipient email address
            subject: Subject line
            html_body: HTML content
            text_body: Plain text fallback

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        try:
            response = self.ses_client.send_email(
                Source=self.sender,
                Destination={'ToAddresses': [to_email]},
                Message={
                    'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                    'Body': {
                        'Html': {'Data': html_body, 'Charset': 'UTF-8'},
                        'Text': {'Data': text_body, 'Charset': 'UTF-8'}
                    }
                }
            )

            message_id = response.get('MessageId')
            logger.info(f"Email '{subject}' sent to {to_email} (MessageId: {message_id})")
            return True

        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            logger.error(f"AWS SES ClientError: {error_code} - {error_message}")

            if error_code == 'MessageRejected':
                logger.error(f"Email rejected: {error_message}")
            elif error_code == 'MailFromDomainNotVerified':
                logger.error("Sender email not verified in SES")

            return False

        except BotoCoreError as e:
            logger.error(f"AWS BotoCoreError: {str(e)}")
            return False

    def send_verification_code(self, to_email: str, code: str) -> bool:
        """Code that confirms the address of a newly created account."""
        lines = [
            "Verify your email to complete your signup process.",
            "Here is your verification code:",
        ]
        return self._send_code(to_email, "Verify your email", lines, code)

    def send_password_reset_code(self, to_email: str, code: str) -> bool:
        """Code that authorizes setting a new password."""
        lines = [
            "You have initiated a reset password process.",
            "Enter the code below in the app, together with your new password:",
        ]
        return self._send_code(to_email, "Reset your password", lines, code)

    def send_email_change_code(self, to_email: str, code: str) -> bool:
        """Code sent to the *new* address to prove the account holder controls it."""
        lines = [
            "You've requested to change the email address on your account.",
            "Here is your verification code:",
        ]
        return self._send_code(to_email, "Verify your new email", lines, code)

    def _send_code(self, to_email: str, subject: str, lines, code: str) -> bool:
        expiry = f"The code expires in {expiry_statement()}."
        html_body = self._build_code_html(lines, code, expiry)
        text_body = self._build_code_text(lines, code, expiry)
        return self.send(to_email, subject, html_body, text_body)

    def _build_code_html(self, lines, code: str, expiry: str) -> str:
        paragraphs = "\n".join(
            f'<p style="margin: 0 0 16px 0; color: #666666; font-size: 16px;">{line}</p>'
            for line in lines
        )
        return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
</head>
<body style="margin: 0; padding: 24px; font-family: Arial, sans-serif;">
    <p style="margin: 0 0 16px 0; color: #333333; font-size: 16px;">Hello,</p>
    {paragraphs}
    <div style="font-size: 32px; font-weight: 700; letter-spacing: 8px; color: #4F46E5; font-family: 'Courier New', monospace;">
        {code}
    </div>
    <p style="margin: 16px 0 0 0; color: #666666; font-size: 14px;">{expiry}</p>
</body>
</html>
"""

    def _build_code_text(self, lines, code: str, expiry: str) -> str:
        body = "\n".join(lines)
        return f"""Hello,

{body}

{code}

{expiry}
"""
