# jrdriving/routers/quotes.py
from fastapi import APIRouter, Depends, status

from jrdriving.dependencies import get_quote_service, require
from jrdriving.schemas.quote import QuoteCreate, QuoteOut, QuoteUpdate
from jrdriving.services.permissions import Caller, Capability
from jrdriving.services.quote_service import QuoteService
from jrdriving.utils.attachments import download_response

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("", response_model=QuoteOut, status_code=status.HTTP_201_CREATED, summary="Request a quote")
async def create_quote(body: QuoteCreate, service: QuoteService = Depends(get_quote_service)):
    return await service.create_quote(body)


@router.get("/{quote_id}", response_model=QuoteOut, summary="Quote with attachment metadata")
def get_quote(
    quote_id: int,
    caller: Caller = Depends(require(Capability.QUOTE_REVIEW)),
    service: QuoteService = Depends(get_quote_service),
):
    return service.get_quote(quote_id)


@router.patch("/{quote_id}", response_model=QuoteOut, summary="Update quote status or estimated price")
def update_quote(
    quote_id: int,
    body: QuoteUpdate,
    caller: Caller = Depends(require(Capability.QUOTE_REVIEW)),
    service: QuoteService = Depends(get_quote_service),
):
    return service.update_quote(quote_id, body)


@router.get("/{quote_id}/attachments/{attachment_id}", summary="Download a quote attachment")
def download_quote_attachment(
    quote_id: int,
    attachment_id: int,
    caller: Caller = Depends(require(Capability.QUOTE_REVIEW)),
    service: QuoteService = Depends(get_quote_service),
):
    return download_response(service.get_attachment(quote_id, attachment_id))
