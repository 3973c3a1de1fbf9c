# jrdriving/services/recruitment_service.py
"""
Driver recruitment: public applications with documents, admin status review.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from jrdriving.config import Settings
from jrdriving.errors import NotFound
from jrdriving.models.driver_application import DriverApplication, DriverApplicationAttachment
from jrdriving.schemas.driver_application import (
    DriverApplicationCreate,
    DriverApplicationOut,
    DriverApplicationUpdate,
)
from jrdriving.services.notifier import EventKind, Notifier
from jrdriving.utils.attachments import attachment_payload, check_attachments
from jrdriving.utils.logger import get_logger

logger = get_logger(__name__)


class RecruitmentService:
    def __init__(self, db: Session, settings: Settings, notifier: Notifier):
        self.db = db
        self.settings = settings
        self.notifier = notifier

    def _get(self, application_id: int) -> DriverApplication:
        application = self.db.query(DriverApplication).filter(DriverApplication.id == application_id).first()
        if not application:
            raise NotFound("Application not found")
        return application

    async def submit_application(self, data: DriverApplicationCreate) -> DriverApplication:
        check_attachments(data.attachments, self.settings.ATTACHMENT_MAX_BYTES)

        application = DriverApplication(**data.model_dump(exclude={"attachments"}))
        self.db.add(application)
        self.db.flush()

        for item in data.attachments:
            self.db.add(DriverApplicationAttachment(
                application_id=application.id,
                file_name=item.name,
                mime_type=item.type,
                file_size=item.size,
                content=item.data,
            ))
        self.db.commit()
        self.db.refresh(application)

        logger.info(f"[RECRUITMENT] Application #{application.id} from {application.email}")

        payload = {"id": application.id}
        payload.update(data.model_dump(mode="json", by_alias=True, exclude={"attachments"}))
        payload["attachments"] = attachment_payload(data.attachments)
        self.notifier.notify(EventKind.DRIVER_APPLICATION, payload)
        return application

    def update_status(self, application_id: int, data: DriverApplicationUpdate) -> DriverApplicationOut:
        application = self._get(application_id)
        if application.status != data.status:
            previous = application.status
            application.status = data.status
            application.updated_at = datetime.utcnow()
            self.db.commit()
            self.db.refresh(application)
            logger.info(f"[RECRUITMENT] Application #{application_id}: {previous.value} → {data.status.value}")

        attachments = (
            self.db.query(DriverApplicationAttachment)
            .filter(DriverApplicationAttachment.application_id == application_id)
            .order_by(DriverApplicationAttachment.id)
            .all()
        )
        return DriverApplicationOut.from_record(application, attachments)

    def get_attachment(self, application_id: int, attachment_id: int) -> DriverApplicationAttachment:
        attachment = (
            self.db.query(DriverApplicationAttachment)
            .filter(
                DriverApplicationAttachment.id == attachment_id,
                DriverApplicationAttachment.application_id == application_id,
            )
            .first()
        )
        if not attachment:
            raise NotFound("File not found")
        return attachment
