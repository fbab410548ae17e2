"""Report delivery over SMTP using yagmail."""
import logging
from pathlib import Path

import yagmail

from .config import settings


def send_report(report_path: Path, subject: str = "Trip options") -> bool:
    """Mail the rendered report as the message body. Returns False when email is not configured."""
    if not settings.email_configured():
        logging.warning("Report %s not mailed: email credentials not fully configured.", report_path)
        return False
    html_body = Path(report_path).read_text(encoding="utf-8")
    yag = yagmail.SMTP(settings.src_mail, settings.src_pwd, port=587, smtp_starttls=True, smtp_ssl=False)
    yag.send(to=settings.dst_mail, subject=subject, contents=html_body)
    logging.info("Report %s mailed to %s", report_path, settings.dst_mail)
    return True
