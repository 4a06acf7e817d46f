from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmtpConfig:
    host: str = ""
    port: int = 587
    user: str = ""
    password: str = ""
    sender_name: str = "BioTechnique PO System"
    timeout_seconds: int = 30

    @property
    def is_configured(self) -> bool:
        return bool(self.host)

    @property
    def use_implicit_tls(self) -> bool:
        # 465 is SMTPS; every other port is upgraded with STARTTLS.
        return self.port == 465


def get_smtp_config() -> SmtpConfig:
    """
    Load SMTP settings from SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_SENDER_NAME.

    Never raises: an empty host or an invalid SMTP_PORT yields an unconfigured
    config, so dispatch is skipped.
    """
    defaults = SmtpConfig()
    port_raw = os.getenv("SMTP_PORT", "").strip()
    try:
        port = int(port_raw) if port_raw else defaults.port
    except ValueError:
        logger.warning("SMTP_PORT must be an integer, got %r; dispatch disabled.", port_raw)
        return defaults
    return SmtpConfig(
        host=os.getenv("SMTP_HOST", "").strip(),
        port=port,
        user=os.getenv("SMTP_USER", "").strip(),
        password=os.getenv("SMTP_PASS", ""),
        sender_name=os.getenv("SMTP_SENDER_NAME", "").strip() or defaults.sender_name,
    )
