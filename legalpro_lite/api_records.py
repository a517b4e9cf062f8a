"""
Practice Records API
====================

Owner-scoped CRUD for cases, clients, hearings, alerts, time entries and
invoices (mounted under /api). Every resource exposes:

- GET    /{resource}       - List (newest first)
- POST   /{resource}       - Create
- GET    /{resource}/{id}  - Get
- PUT    /{resource}/{id}  - Partial update (optional If-Match: <version>)
- DELETE /{resource}/{id}  - Delete

Extra endpoints:
- GET   /cases/{id}/conflicts  - Conflicts of a case against the owner's other cases
- PATCH /alerts/{id}/read      - Mark one alert read
- POST  /alerts/read-all       - Mark every alert read
- POST  /invoices/{id}/send    - Email an invoice to its client
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Type

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import email_utils
from .auth import AuthContext
from .conflicts import detect_conflicts
from .db.models import Alert, Case, Client, Hearing, Invoice, TimeEntry
from .dependencies import expected_version, get_db_dependency, require_session
from .errors import BadRequest, LegalProError, NotFound, ServerError
from .repository import OwnedRepository
from .schemas import (
    AlertCreate, AlertResponse, AlertUpdate,
    CaseCreate, CaseResponse, CaseUpdate,
    ClientCreate, ClientResponse, ClientUpdate,
    ConflictResponse,
    HearingCreate, HearingResponse, HearingUpdate,
    InvoiceCreate, InvoiceResponse, InvoiceSendRequest, InvoiceSendResponse, InvoiceUpdate,
    OkResponse, ReadAllResponse,
    TimeEntryCreate, TimeEntryResponse, TimeEntryUpdate,
)

logger = logging.getLogger(__name__)


def check_references(db: Session, owner_id: str, data: Dict[str, Any], references: Tuple[Tuple[str, Type], ...]) -> None:
    """Referenced records must exist and belong to the same owner (404 otherwise)."""
    for field, model in references:
        value = data.get(field)
        if value and OwnedRepository(db, model, owner_id).find(value) is None:
            logger.info(f"Rejected reference {field}={value}: not found for owner")
            raise NotFound()


def build_crud_router(
    *,
    prefix: str,
    tag: str,
    model: Type,
    create_schema: Type,
    update_schema: Type,
    response_schema: Type,
    references: Tuple[Tuple[str, Type], ...] = (),
) -> APIRouter:
    """Uniform owner-scoped CRUD endpoints for one model."""
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("", response_model=List[response_schema])
    async def list_records(
        auth: AuthContext = Depends(require_session),
        db: Session = Depends(get_db_dependency),
    ):
        return OwnedRepository(db, model, auth.user_id).list()

    @router.post("", response_model=response_schema, status_code=201)
    async def create_record(
        payload: create_schema,
        auth: AuthContext = Depends(require_session),
        db: Session = Depends(get_db_dependency),
    ):
        data = payload.to_record()
        check_references(db, auth.user_id, data, references)
        return OwnedRepository(db, model, auth.user_id).create(data)

    @router.get("/{record_id}", response_model=response_schema)
    async def get_record(
        record_id: str,
        auth: AuthContext = Depends(require_session),
        db: Session = Depends(get_db_dependency),
    ):
        return OwnedRepository(db, model, auth.user_id).get(record_id)

    @router.api_route("/{record_id}", methods=["PUT", "PATCH"], response_model=response_schema)
    async def update_record(
        record_id: str,
        payload: update_schema,
        version: Optional[int] = Depends(expected_version),
        auth: AuthContext = Depends(require_session),
        db: Session = Depends(get_db_dependency),
    ):
        data = payload.to_record(partial=True)
        check_references(db, auth.user_id, data, references)
        return OwnedRepository(db, model, auth.user_id).update(record_id, data, expected_version=version)

    @router.delete("/{record_id}", response_model=OkResponse)
    async def delete_record(
        record_id: str,
        auth: AuthContext = Depends(require_session),
        db: Session = Depends(get_db_dependency),
    ):
        OwnedRepository(db, model, auth.user_id).delete(record_id)
        return OkResponse()

    return router


# =============================================================================
# Resources
# =============================================================================

cases_router = build_crud_router(
    prefix="/cases", tag="Cases", model=Case,
    create_schema=CaseCreate, update_schema=CaseUpdate, response_schema=CaseResponse,
    references=(("client_id", Client),),
)

clients_router = build_crud_router(
    prefix="/clients", tag="Clients", model=Client,
    create_schema=ClientCreate, update_schema=ClientUpdate, response_schema=ClientResponse,
)

hearings_router = build_crud_router(
    prefix="/hearings", tag="Hearings", model=Hearing,
    create_schema=HearingCreate, update_schema=HearingUpdate, response_schema=HearingResponse,
    references=(("case_id", Case),),
)

alerts_router = build_crud_router(
    prefix="/alerts", tag="Alerts", model=Alert,
    create_schema=AlertCreate, update_schema=AlertUpdate, response_schema=AlertResponse,
    references=(("case_id", Case),),
)

time_entries_router = build_crud_router(
    prefix="/time-entries", tag="Time Entries", model=TimeEntry,
    create_schema=TimeEntryCreate, update_schema=TimeEntryUpdate, response_schema=TimeEntryResponse,
    references=(("case_id", Case),),
)

invoices_router = build_crud_router(
    prefix="/invoices", tag="Invoices", model=Invoice,
    create_schema=InvoiceCreate, update_schema=InvoiceUpdate, response_schema=InvoiceResponse,
    references=(("client_id", Client), ("case_id", Case)),
)


@cases_router.get("/{record_id}/conflicts", response_model=List[ConflictResponse])
async def case_conflicts(
    record_id: str,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    """Run conflict detection for one case against the owner's other cases."""
    repo = OwnedRepository(db, Case, auth.user_id)
    case = repo.get(record_id)
    return [conflict.to_dict() for conflict in detect_conflicts(case, repo.list())]


@alerts_router.post("/read-all", response_model=ReadAllResponse)
async def mark_all_alerts_read(
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    repo = OwnedRepository(db, Alert, auth.user_id)
    unread = repo.query().filter(Alert.is_read.is_(False)).all()
    now = datetime.utcnow()
    for alert in unread:
        alert.is_read = True
        alert.version = (alert.version or 1) + 1
        alert.updated_at = now
    db.commit()
    return ReadAllResponse(updated=len(unread))


@alerts_router.patch("/{record_id}/read", response_model=AlertResponse)
async def mark_alert_read(
    record_id: str,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    return OwnedRepository(db, Alert, auth.user_id).update(record_id, {"is_read": True})


@invoices_router.post("/{record_id}/send", response_model=InvoiceSendResponse)
async def send_invoice(
    record_id: str,
    payload: InvoiceSendRequest,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    """
    Email an invoice.
    The recipient defaults to the email of the invoice's client.
    """
    invoice = OwnedRepository(db, Invoice, auth.user_id).get(record_id)

    recipient = payload.to
    if not recipient:
        client = OwnedRepository(db, Client, auth.user_id).find(invoice.client_id)
        if client is None or not client.email:
            raise BadRequest("Client not found for invoice")
        recipient = client.email

    try:
        sent = email_utils.send_invoice_email(
            to_email=recipient,
            invoice=invoice,
            subject=payload.subject,
            message=payload.message,
        )
    except LegalProError:
        raise
    except Exception as e:
        logger.error(f"Invoice {invoice.id} email failed: {e}")
        raise ServerError("Failed to send invoice email")

    if not sent:
        raise ServerError("Failed to send invoice email")

    logger.info(f"Invoice {invoice.id} sent to {recipient}")
    return InvoiceSendResponse(to=recipient)


routers = [
    cases_router,
    clients_router,
    hearings_router,
    alerts_router,
    time_entries_router,
    invoices_router,
]
