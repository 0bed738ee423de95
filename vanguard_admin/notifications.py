"""
Transactional email over SMTP.

Notifications accompany mutations but never decide their outcome:
send_best_effort() reports failures on stderr and returns.
"""

import smtplib
import sys
from email.message import EmailMessage
from typing import Optional, Tuple

from vanguard_admin import config


class EmailNotifier:
    def __init__(self, host: Optional[str] = None, port: Optional[int] = None,
                 user: Optional[str] = None, password: Optional[str] = None,
                 sender: Optional[str] = None, use_tls: Optional[bool] = None):
        self.host = config.SMTP_HOST if host is None else host
        self.port = config.SMTP_PORT if port is None else port
        self.user = config.SMTP_USER if user is None else user
        self.password = config.SMTP_PASSWORD if password is None else password
        self.sender = config.SMTP_FROM if sender is None else sender
        self.use_tls = config.SMTP_USE_TLS if use_tls is None else use_tls

    def is_configured(self) -> bool:
        return bool(self.host and self.sender)

    def send(self, to: str, subject: str, body: str) -> Tuple[bool, str]:
        if not self.is_configured():
            return False, "SMTP not configured"

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.set_content(body)

        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(msg)
        return True, ""


def send_best_effort(notifier, to: str, subject: str, body: str) -> bool:
    """Send an email without letting any failure escape."""
    if notifier is None:
        return False
    try:
        ok, error = notifier.send(to, subject, body)
    except Exception as e:
        ok, error = False, str(e)[:400]
    if not ok:
        print(f"[WARN] [email] Could not send '{subject}' to {to}: {error}", file=sys.stderr)
    return ok


def membership_confirmation(member: dict) -> Tuple[str, str]:
    """Subject and plain-text body for a newly activated membership."""
    expiry = member.get("expiryDate") or "Lifetime"
    subject = "Equality Vanguard Membership Confirmed"
    body = (
        f"Dear {member.get('fullName') or member.get('email')},\n\n"
        f"Your {member.get('membershipType')} membership is now active.\n"
        f"Join date: {member.get('joinDate')}\n"
        f"Expiry date: {expiry}\n"
        f"Amount: {member.get('amount')} {member.get('currency')}\n\n"
        "Thank you for standing with us.\n"
        "Equality Vanguard"
    )
    return subject, body


def submission_published(submission: dict, review_notes: Optional[str]) -> Tuple[str, str]:
    subject = "Your Submission Has Been Approved!"
    body = (
        f"Dear {submission.get('submitterName') or submission.get('authorName')},\n\n"
        f"Your article \"{submission.get('title')}\" has been approved and published.\n\n"
        f"Reviewer notes: {review_notes or 'No additional notes provided.'}\n\n"
        "Thank you for contributing to the archive.\n"
        "Equality Vanguard"
    )
    return subject, body


def submission_rejected(submission: dict, review_notes: str,
                        reason: Optional[str]) -> Tuple[str, str]:
    subject = "Submission Update - Equality Vanguard"
    body = (
        f"Dear {submission.get('submitterName') or submission.get('authorName')},\n\n"
        f"Thank you for submitting \"{submission.get('title')}\". After review we are "
        "unable to publish it at this time.\n\n"
        f"Reason: {reason or 'Content does not meet our guidelines'}\n"
        f"Feedback: {review_notes}\n\n"
        "We encourage you to revise and submit again.\n"
        "Equality Vanguard"
    )
    return subject, body
