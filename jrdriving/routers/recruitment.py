# jrdriving/routers/recruitment.py
from fastapi import APIRouter, Depends, status

from jrdriving.dependencies import get_recruitment_service, require
from jrdriving.schemas.driver_application import (
    DriverApplicationCreate, DriverApplicationCreated, DriverApplicationOut, DriverApplicationUpdate,
)
from jrdriving.services.permissions import Caller, Capability
from jrdriving.services.recruitment_service import RecruitmentService
from jrdriving.utils.attachments import download_response

router = APIRouter(prefix="/recruitment", tags=["recruitment"])


@router.post("", response_model=DriverApplicationCreated, status_code=status.HTTP_201_CREATED,
             summary="Submit a driver application")
async def submit_application(
    body: DriverApplicationCreate,
    service: RecruitmentService = Depends(get_recruitment_service),
):
    application = await service.submit_application(body)
    return DriverApplicationCreated(id=application.id, message="Application received.")


@router.patch("/applications/{application_id}", response_model=DriverApplicationOut,
              summary="Update application review status")
def update_application(
    application_id: int,
    body: DriverApplicationUpdate,
    caller: Caller = Depends(require(Capability.APPLICATION_REVIEW)),
    service: RecruitmentService = Depends(get_recruitment_service),
):
    return service.update_status(application_id, body)


@router.get("/applications/{application_id}/attachments/{attachment_id}",
            summary="Download an application document")
def download_application_attachment(
    application_id: int,
    attachment_id: int,
    caller: Caller = Depends(require(Capability.APPLICATION_REVIEW)),
    service: RecruitmentService = Depends(get_recruitment_service),
):
    return download_response(service.get_attachment(application_id, attachment_id))
