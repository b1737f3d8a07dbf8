from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException

from coffeecore.api.auth import require_api_key
from coffeecore.api.schemas import (
    ContactIn,
    FocusOut,
    ModalEmailIn,
    ModalOut,
    ProductOut,
    SessionOut,
    SubmissionOut,
)
from coffeecore.catalog.products import list_products
from coffeecore.core.site import SessionRegistry, SiteSession
from coffeecore.errors import ModalClosed, SubmissionBusy, ValidationFailed

router = APIRouter(dependencies=[Depends(require_api_key)])

registry = SessionRegistry()


def _session(session_id: str) -> SiteSession:
    s = registry.get(session_id)
    if s is None:
        raise HTTPException(status_code=404, detail="Unknown session")
    return s


def _unprocessable(e: ValidationFailed) -> HTTPException:
    return HTTPException(status_code=422, detail={"field": e.field, "reason": e.reason})


@router.get("/api/products", response_model=List[ProductOut])
def products(status: Optional[Literal["present", "future"]] = None):
    return [
        ProductOut(id=p.id, name=p.name, status=p.status, summary=p.summary, tag=p.tag)
        for p in list_products(status)
    ]


@router.post("/api/sessions", response_model=SessionOut)
def create_session():
    return SessionOut(sessionId=registry.create())


@router.delete("/api/sessions/{session_id}")
def drop_session(session_id: str):
    if not registry.drop(session_id):
        raise HTTPException(status_code=404, detail="Unknown session")
    return {"status": "ok"}


@router.post("/api/sessions/{session_id}/products/{product_id}/click", response_model=ModalOut)
async def click_product(session_id: str, product_id: str):
    s = _session(session_id)
    try:
        s.click_product(product_id)
    except ValidationFailed as e:
        raise _unprocessable(e)
    return s.modal.view()


@router.get("/api/sessions/{session_id}/modal", response_model=ModalOut)
def modal_view(session_id: str):
    return _session(session_id).modal.view()


@router.post("/api/sessions/{session_id}/modal/close", response_model=ModalOut)
def close_modal(session_id: str):
    s = _session(session_id)
    s.close_modal()
    return s.modal.view()


@router.post("/api/sessions/{session_id}/modal/submit", response_model=SubmissionOut)
async def submit_modal(session_id: str, body: ModalEmailIn):
    s = _session(session_id)
    try:
        sub = await s.submit_modal_email(body.email)
    except ValidationFailed as e:
        raise _unprocessable(e)
    except SubmissionBusy:
        raise HTTPException(status_code=409, detail="Submission already in progress")
    except ModalClosed:
        raise HTTPException(status_code=409, detail="Modal is closed")
    return sub.view()


@router.post("/api/sessions/{session_id}/contact", response_model=SubmissionOut)
async def submit_contact(session_id: str, body: ContactIn):
    s = _session(session_id)
    try:
        sub = await s.submit_contact(name=body.name, email=body.email, message=body.message)
    except ValidationFailed as e:
        raise _unprocessable(e)
    except SubmissionBusy:
        raise HTTPException(status_code=409, detail="Submission already in progress")
    return sub.view()


@router.get("/api/sessions/{session_id}/contact", response_model=SubmissionOut)
def contact_view(session_id: str):
    return _session(session_id).contact.current.view()


@router.post("/api/sessions/{session_id}/sections/{section_id}/focus", response_model=FocusOut)
async def focus_section(session_id: str, section_id: str):
    found = _session(session_id).focus_section(section_id)
    return FocusOut(sectionId=section_id, found=found)
