from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import ADMIN_TYPE
from app.core.routing import ApiRoute
from app.db.session import get_db
from app.schemas.common import MessageResponse
from app.schemas.mailing_list import ContactMessage, MailingListEntryOut, MailingListSubscribe
from app.services import mailing_list as service

router = APIRouter(tags=["Mailing List"], route_class=ApiRoute)


@router.post("/contact-us", response_model=MessageResponse)
def contact_us(payload: ContactMessage):
    return MessageResponse(message=service.send_contact_message(payload))


@router.post("/mailing-list", response_model=MessageResponse)
def subscribe(payload: MailingListSubscribe, db: Session = Depends(get_db)):
    return MessageResponse(message=service.subscribe(db, payload.email))


@router.get("/mailing-list", response_model=List[MailingListEntryOut], dependencies=[Depends(ADMIN_TYPE)])
def list_subscribers(db: Session = Depends(get_db)):
    return service.list_subscribers(db)
