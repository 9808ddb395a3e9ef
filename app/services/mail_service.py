# app/services/mail_service.py

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from fastapi.concurrency import run_in_threadpool
from app.core.config import Settings
from app.core.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)


def _layout(title: str, body: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <div style="background: #667eea; padding: 24px; text-align: center; border-radius: 10px 10px 0 0;">
        <h1 style="color: white; margin: 0;">🎬 StreamVibe</h1>
      </div>
      <div style="background: white; padding: 24px; border-radius: 0 0 10px 10px;">
        <h2 style="color: #333;">{title}</h2>
        {body}
      </div>
    </div>
    """


def _code_block(code: str, minutes: int) -> str:
    return f"""
    <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; text-align: center;">
      <div style="font-size: 32px; font-weight: bold; letter-spacing: 5px; font-family: 'Courier New', monospace;">
        {code}
      </div>
      <p style="color: #999; font-size: 12px;">이 코드는 {minutes}분 후 만료됩니다</p>
    </div>
    """


class MailService:
    """SMTP 메일 발송"""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _build_message(self, to: str, subject: str, text: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = formataddr((self.settings.mail_from_name, self.settings.mail_from))
        message["To"] = to
        message.set_content(text)
        message.add_alternative(html, subtype="html")
        return message

    def _send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(
            self.settings.smtp_host, self.settings.smtp_port, timeout=10
        ) as smtp:
            if self.settings.smtp_use_tls:
                smtp.starttls()
            if self.settings.smtp_username:
                smtp.login(self.settings.smtp_username, self.settings.smtp_password)
            smtp.send_message(message)

    async def _deliver(self, message: EmailMessage, failure_message: str) -> None:
        if not self.settings.smtp_configured:
            logger.warning("SMTP 미설정 - %s 메일을 보내지 못했습니다", message["To"])
            raise MailDeliveryError(failure_message)
        try:
            await run_in_threadpool(self._send, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("메일 발송 실패: %s", message["To"])
            raise MailDeliveryError(failure_message) from e
        logger.info("메일 발송 완료: %s (%s)", message["To"], message["Subject"])

    async def send_verification_code(self, email: str, code: str, username: str) -> None:
        minutes = self.settings.verification_code_expire_minutes
        html = _layout(
            f"{username}님, 환영합니다! 👋",
            "<p>회원가입을 완료하려면 아래 인증 코드를 입력해주세요.</p>"
            + _code_block(code, minutes)
            + "<p style='color: #999; font-size: 12px;'>본인이 가입하지 않았다면 이 메일을 무시하세요.</p>",
        )
        text = f"{username}님, StreamVibe 인증 코드: {code} ({minutes}분 후 만료)"
        message = self._build_message(email, "🎬 StreamVibe 이메일 인증 코드", text, html)
        await self._deliver(message, "인증 코드 발송에 실패했습니다")

    async def send_welcome_email(self, email: str, username: str) -> None:
        html = _layout(
            f"StreamVibe에 오신 것을 환영합니다, {username}님! 🎉",
            "<p>이메일 인증이 완료되었습니다. 선호 장르를 설정하고 왓치리스트를 만들어보세요.</p>"
            f"<p><a href='{self.settings.frontend_url}'>영화 둘러보기 🍿</a></p>",
        )
        text = f"{username}님, 이메일 인증이 완료되었습니다. {self.settings.frontend_url}"
        message = self._build_message(email, "🎉 StreamVibe 가입을 환영합니다", text, html)
        await self._deliver(message, "환영 메일 발송에 실패했습니다")

    async def send_password_reset_code(self, email: str, code: str, username: str) -> None:
        minutes = self.settings.password_reset_code_expire_minutes
        html = _layout(
            "비밀번호 재설정 🔐",
            f"<p>{username}님, 비밀번호 재설정 요청을 받았습니다. 아래 코드를 입력해주세요.</p>"
            + _code_block(code, minutes)
            + "<p style='color: #999; font-size: 12px;'>요청하지 않았다면 이 메일을 무시하세요. 계정은 안전합니다.</p>",
        )
        text = f"{username}님, StreamVibe 비밀번호 재설정 코드: {code} ({minutes}분 후 만료)"
        message = self._build_message(email, "🔐 StreamVibe 비밀번호 재설정 코드", text, html)
        await self._deliver(message, "비밀번호 재설정 코드 발송에 실패했습니다")
