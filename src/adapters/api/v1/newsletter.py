"""Newsletter subscription endpoint."""

from fastapi import APIRouter

from src.core.dependencies import ClientIP, LeadCapture

from .schemas import NewsletterAcceptedResponse, NewsletterRequest

router = APIRouter()


@router.post("/", response_model=NewsletterAcceptedResponse)
async def subscribe(body: NewsletterRequest, client_ip: ClientIP, lead_capture: LeadCapture):
    """Subscribe an address to the newsletter.

    Answers 200 with the same body whether the address is new or already on
    the list.
    """
    await lead_capture.newsletter_service.subscribe(body.to_form_fields(), client_ip)
    return NewsletterAcceptedResponse()
