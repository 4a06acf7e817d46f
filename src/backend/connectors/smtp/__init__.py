"""SMTP delivery of rendered documents."""

from .config import SmtpConfig, get_smtp_config
from .mailer import DispatchResult, SmtpMailer

__all__ = ["DispatchResult", "SmtpConfig", "SmtpMailer", "get_smtp_config"]
