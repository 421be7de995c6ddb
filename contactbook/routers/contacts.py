from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, File, Form, Request, Response, UploadFile

from contactbook.domain.contacts import Address, Contact
from contactbook.domain.validation import SearchCriteria, clean_text, parse_birthdate
from contactbook.services.contact_service import ContactService

router = APIRouter(prefix="/contact", tags=["contacts"])


def _get_contact_service(request: Request) -> ContactService:
    svc = getattr(getattr(request.app, "state", None), "contact_service", None)
    if not svc:
        raise RuntimeError("ContactService not configured")
    return svc


async def _read_upload(file: Optional[UploadFile], limit: int) -> Optional[bytes]:
    """Read at most ``limit`` bytes; a payload that fills the buffer is oversized."""
    if file is None or not file.filename:
        return None
    data = await file.read(limit) if limit > 0 else await file.read()
    return data or None


def _contact_from_form(
    *,
    contact_id=None,
    image: Optional[bytes],
    name: Optional[str],
    company: Optional[str],
    email: Optional[str],
    work_phone: Optional[str],
    personal_phone: Optional[str],
    birthdate: Optional[str],
    line1: Optional[str],
    line2: Optional[str],
    city: Optional[str],
    state: Optional[str],
    zip_code: Optional[str],
    country: Optional[str],
) -> Contact:
    address = Address(
        line1=clean_text(line1),
        line2=clean_text(line2),
        line3="",
        city=clean_text(city),
        state=clean_text(state),
        zip=clean_text(zip_code),
        country=clean_text(country),
    )
    return Contact(
        id=contact_id,
        name=clean_text(name),
        company=clean_text(company),
        profile_image=image,
        email=clean_text(email),
        birthdate=parse_birthdate(birthdate),
        work_phone=clean_text(work_phone),
        personal_phone=clean_text(personal_phone),
        address=address,
    )


@router.get("")
def list_contacts(
    request: Request,
    email: Optional[str] = None,
    phone: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
):
    svc = _get_contact_service(request)
    criteria = SearchCriteria.from_query(email=email, phone=phone, city=city, state=state)
    return [contact.to_dict() for contact in svc.search(criteria)]


@router.get("/{contact_id}")
def get_contact(contact_id: str, request: Request):
    svc = _get_contact_service(request)
    return svc.get(contact_id).to_dict()


@router.get("/{contact_id}/profile_img")
def get_profile_image(contact_id: str, request: Request):
    svc = _get_contact_service(request)
    # stored as uploaded; only presumed to be a JPEG
    return Response(content=svc.get_profile_image(contact_id), media_type="image/jpeg")


@router.post("", status_code=201)
async def create_contact(
    request: Request,
    file: UploadFile | None = File(None),
    name: Optional[str] = Form(None),
    company: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    work_phone: Optional[str] = Form(None, alias="workPhone"),
    personal_phone: Optional[str] = Form(None, alias="personalPhone"),
    birthdate: Optional[str] = Form(None),
    line1: Optional[str] = Form(None),
    line2: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    zip_code: Optional[str] = Form(None, alias="zip"),
    country: Optional[str] = Form(None),
):
    svc = _get_contact_service(request)
    image = await _read_upload(file, svc.settings.max_image_bytes)
    contact = _contact_from_form(
        image=image,
        name=name,
        company=company,
        email=email,
        work_phone=work_phone,
        personal_phone=personal_phone,
        birthdate=birthdate,
        line1=line1,
        line2=line2,
        city=city,
        state=state,
        zip_code=zip_code,
        country=country,
    )
    return svc.create(contact).to_dict()


@router.put("/{contact_id}")
async def update_contact(
    contact_id: str,
    request: Request,
    file: UploadFile | None = File(None),
    name: Optional[str] = Form(None),
    company: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    work_phone: Optional[str] = Form(None, alias="workPhone"),
    personal_phone: Optional[str] = Form(None, alias="personalPhone"),
    birthdate: Optional[str] = Form(None),
    line1: Optional[str] = Form(None),
    line2: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    zip_code: Optional[str] = Form(None, alias="zip"),
    country: Optional[str] = Form(None),
):
    svc = _get_contact_service(request)
    image = await _read_upload(file, svc.settings.max_image_bytes)
    contact = _contact_from_form(
        contact_id=contact_id,
        image=image,
        name=name,
        company=company,
        email=email,
        work_phone=work_phone,
        personal_phone=personal_phone,
        birthdate=birthdate,
        line1=line1,
        line2=line2,
        city=city,
        state=state,
        zip_code=zip_code,
        country=country,
    )
    return svc.update(contact).to_dict()


@router.delete("/{contact_id}")
def delete_contact(contact_id: str, request: Request):
    svc = _get_contact_service(request)
    return {"deleted": svc.delete(contact_id)}
