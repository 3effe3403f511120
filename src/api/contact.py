"""Contact form API endpoint."""

from html import escape
from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_current_user, get_mailer
from src.config import get_settings
from src.errors import ValidationError
from src.models.user import User
from src.schemas.auth import DeliveryResponse
from src.schemas.contact import ContactMessage
from src.services.mailer import Mailer

router = APIRouter(prefix="/api/contactus", tags=["contact"])


@router.post("", response_model=DeliveryResponse)
async def contact_us(
    contact: ContactMessage,
    current_user: Annotated[User, Depends(get_current_user)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
):
    """Relay a message from the current user to the support mailbox."""
    if not contact.subject or not contact.message:
        raise ValidationError("Please add subject and message")

    support_address = get_settings().email_user
    await mailer.send_email(
        subject=contact.subject,
        html=f"<p>{escape(contact.message)}</p>",
        send_to=support_address,
        sent_from=support_address,
        reply_to=current_user.email,
    )
    return DeliveryResponse(success=True, message="Email Sent")
