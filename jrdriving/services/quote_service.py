# jrdriving/services/quote_service.py
"""
Quote requests: public submission with inline attachments, admin review.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from jrdriving.config import Settings
from jrdriving.errors import NotFound
from jrdriving.models.quote import Quote, QuoteAttachment
from jrdriving.schemas.quote import QuoteCreate, QuoteOut, QuoteUpdate
from jrdriving.services.notifier import EventKind, Notifier
from jrdriving.utils.attachments import attachment_payload, check_attachments
from jrdriving.utils.logger import get_logger

logger = get_logger(__name__)


class QuoteService:
    def __init__(self, db: Session, settings: Settings, notifier: Notifier):
        self.db = db
        self.settings = settings
        self.notifier = notifier

    def _get(self, quote_id: int) -> Quote:
        quote = self.db.query(Quote).filter(Quote.id == quote_id).first()
        if not quote:
            raise NotFound("Quote not found")
        return quote

    def _attachments(self, quote_id: int) -> list[QuoteAttachment]:
        return (
            self.db.query(QuoteAttachment)
            .filter(QuoteAttachment.quote_id == quote_id)
            .order_by(QuoteAttachment.id)
            .all()
        )

    async def create_quote(self, data: QuoteCreate) -> QuoteOut:
        check_attachments(data.attachments, self.settings.ATTACHMENT_MAX_BYTES)

        quote = Quote(**data.model_dump(exclude={"attachments"}))
        self.db.add(quote)
        self.db.flush()

        for item in data.attachments:
            self.db.add(QuoteAttachment(
                quote_id=quote.id,
                file_name=item.name,
                mime_type=item.type,
                file_size=item.size,
                content=item.data,
            ))
        self.db.commit()
        self.db.refresh(quote)

        out = QuoteOut.from_record(quote, self._attachments(quote.id))
        logger.info(f"[QUOTE] #{quote.id} from {quote.email} ({len(data.attachments)} attachment(s))")

        self.notifier.notify(EventKind.QUOTE_CREATED, {
            "quote": out.model_dump(mode="json", by_alias=True, exclude={"attachments"}),
            "attachments": attachment_payload(data.attachments),
        })
        return out

    def get_quote(self, quote_id: int) -> QuoteOut:
        quote = self._get(quote_id)
        return QuoteOut.from_record(quote, self._attachments(quote_id))

    def update_quote(self, quote_id: int, data: QuoteUpdate) -> QuoteOut:
        quote = self._get(quote_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(quote, field, value)
        if changes:
            quote.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(quote)
            logger.info(f"[QUOTE] #{quote_id} updated: {', '.join(changes)}")
        return QuoteOut.from_record(quote, self._attachments(quote_id))

    def get_attachment(self, quote_id: int, attachment_id: int) -> QuoteAttachment:
        attachment = (
            self.db.query(QuoteAttachment)
            .filter(QuoteAttachment.id == attachment_id, QuoteAttachment.quote_id == quote_id)
            .first()
        )
        if not attachment:
            raise NotFound("File not found")
        return attachment
