"""Password reset ticket lifecycle.

A ticket moves from issued to either consumed (a successful reset) or expired
(its ``expires_at`` passes). Expiry is only enforced when a ticket is looked
up; ``purge_expired_tickets`` is housekeeping and does not change that.

Issuing deletes the user's previous ticket and then inserts the new one as two
separate writes. Two concurrent requests for the same user can interleave and
leave two live tickets; this is accepted.
"""

import hashlib
import html
import logging
import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from src.config import get_settings
from src.errors import InvalidOrExpiredToken, NotFound, ValidationError
from src.models.reset_ticket import ResetTicket
from src.models.user import User
from src.services.auth import MIN_PASSWORD_LENGTH, get_user_by_email
from src.services.mailer import Mailer

logger = logging.getLogger(__name__)

RESET_SECRET_BYTES = 32


def hash_reset_token(token: str) -> str:
    """One-way digest of a client-facing reset token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_reset_token(user_id: int) -> str:
    """Random secret with the user id appended.

    The id suffix only disambiguates; all of the security comes from the
    random prefix.
    """
    return secrets.token_hex(RESET_SECRET_BYTES) + str(user_id)


def build_reset_email(user: User, reset_url: str, ttl_minutes: int) -> str:
    """HTML body of the reset email."""
    return f"""
    <h2>Hello {html.escape(user.name)}</h2>
    <p>Please use the url below to reset your password</p>
    <p>This reset link is valid for only {ttl_minutes} minutes</p>

    <a href="{reset_url}" clicktracking="off">{reset_url}</a>

    <p>Regards...</p>
    <p>Pinvent Team</p>
    """


class PasswordResetService:
    """Issues and consumes password reset tickets."""

    def __init__(self, db: Session, mailer: Mailer):
        self.db = db
        self.mailer = mailer
        self.settings = get_settings()

    def issue_ticket(self, user: User) -> str:
        """Replace any ticket the user holds and return the new client token."""
        self.db.query(ResetTicket).filter(ResetTicket.user_id == user.id).delete(
            synchronize_session=False
        )
        self.db.commit()

        token = generate_reset_token(user.id)
        now = datetime.now(UTC)
        ticket = ResetTicket(
            user_id=user.id,
            token_hash=hash_reset_token(token),
            created_at=now,
            expires_at=now + timedelta(minutes=self.settings.reset_ticket_ttl_minutes),
        )
        self.db.add(ticket)
        self.db.commit()
        logger.info(f"Issued reset ticket for user {user.id}")
        return token

    async def forgot_password(self, email: str | None) -> str:
        """Issue a ticket for the account and email its reset link.

        Returns the client-facing token. If the email cannot be sent the
        ticket is left in place and simply expires.
        """
        user = get_user_by_email(self.db, email) if email else None
        if not user:
            raise NotFound("User does not exist")

        token = self.issue_ticket(user)
        reset_url = f"{self.settings.frontend_url.rstrip('/')}/resetpassword/{token}"

        # Raises EmailDeliveryError; the ticket above is not rolled back.
        await self.mailer.send_email(
            subject="Password Reset Request",
            html=build_reset_email(user, reset_url, self.settings.reset_ticket_ttl_minutes),
            send_to=user.email,
            sent_from=self.settings.email_user,
        )
        return token

    def find_live_ticket(self, token: str) -> ResetTicket | None:
        """Ticket matching the token whose expiry is still in the future."""
        return (
            self.db.query(ResetTicket)
            .filter(
                ResetTicket.token_hash == hash_reset_token(token),
                ResetTicket.expires_at > datetime.now(UTC),
            )
            .first()
        )

    def reset_password(self, token: str, new_password: str | None) -> User:
        """Consume a ticket and set the user's new password."""
        ticket = self.find_live_ticket(token)
        if ticket is None:
            raise InvalidOrExpiredToken()

        if not new_password:
            raise ValidationError("Please add a new password")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be up to 6 characters")

        user = self.db.query(User).filter(User.id == ticket.user_id).first()
        if user is None:
            self.db.delete(ticket)
            self.db.commit()
            raise InvalidOrExpiredToken()

        # Password change and ticket removal land in the same commit.
        user.password = new_password
        self.db.delete(ticket)
        self.db.commit()
        logger.info(f"Reset password for user {user.id}")
        return user


def purge_expired_tickets(db: Session, now: datetime | None = None) -> int:
    """Delete tickets past their expiry. Returns the number removed."""
    cutoff = now or datetime.now(UTC)
    removed = (
        db.query(ResetTicket)
        .filter(ResetTicket.expires_at <= cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()
    if removed:
        logger.info(f"Purged {removed} expired reset tickets")
    return removed
