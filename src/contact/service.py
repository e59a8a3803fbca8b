"""Contact intake service."""

import structlog

from src.contact.models import CONTACTS_COLLECTION, ContactMessage
from src.core.database import DocumentStore
from src.core.exceptions import require_fields


logger = structlog.get_logger(__name__)


class ContactService:
    def __init__(self, store: DocumentStore):
        self.store = store

    async def submit(
        self, name: str | None, email: str | None, message: str | None
    ) -> ContactMessage:
        """Store a contact message.

        Raises:
            ValidationError: If any field is missing
        """
        require_fields(name, email, message)

        contact = ContactMessage(name=name, email=email, message=message)
        contact.id = await self.store.insert_one(
            CONTACTS_COLLECTION, contact.to_document()
        )
        logger.info("contact_message_received", contact_id=contact.id)
        return contact
