"""Contact form endpoints."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.concurrency import run_in_threadpool

from src.core.dependencies import ClientIP, LeadCapture, require_admin_key
from src.core.exceptions import StorageUnavailableError

from .schemas import ContactAcceptedResponse, ContactListResponse, ContactRequest, ContactSubmissionResponse

router = APIRouter()


@router.post("/", response_model=ContactAcceptedResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(body: ContactRequest, client_ip: ClientIP, lead_capture: LeadCapture):
    """Accept a contact form submission.

    Returns 400 with ``field_errors`` for invalid fields or a failed bot check,
    429 with ``Retry-After`` when the client is throttled and 503 when no
    store could record the lead.
    """
    await lead_capture.contact_service.submit(body.to_form_fields(), client_ip)
    return ContactAcceptedResponse()


@router.get("/", response_model=ContactListResponse, dependencies=[Depends(require_admin_key)])
async def list_contacts(lead_capture: LeadCapture, limit: int = Query(default=50, ge=1, le=500)):
    """Most recent contact submissions, newest first (requires ``X-API-Key``)."""
    repository = lead_capture.contact_repository
    if repository is None:
        raise StorageUnavailableError("No queryable contact store is configured.", code="contact_store_not_queryable")

    rows = await run_in_threadpool(repository.list_recent, limit)
    submissions = [ContactSubmissionResponse.model_validate(row) for row in rows]
    return ContactListResponse(count=len(submissions), submissions=submissions)
