# menu_backend/routers/type_router.py
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..db.session import get_session
from ..dependencies import require_admin
from ..schemas import MessageResponse, TypeRead, TypeWrite
from ..services.catalog.type_service import TypeService

router = APIRouter(prefix="/type", tags=["Types"])


@router.get("", response_model=List[TypeRead])
def list_types(session: Session = Depends(get_session)):
    return TypeService(session).list_types()


@router.get("/{type_id}", response_model=TypeRead)
def get_type(type_id: int, session: Session = Depends(get_session)):
    return TypeService(session).get_type(type_id)


@router.post("", response_model=TypeRead, dependencies=[Depends(require_admin)])
def create_type(body: TypeWrite, session: Session = Depends(get_session)):
    return TypeService(session).create_type(body.name)


@router.put("/{type_id}", response_model=TypeRead, dependencies=[Depends(require_admin)])
def update_type(type_id: int, body: TypeWrite, session: Session = Depends(get_session)):
    return TypeService(session).update_type(type_id, body.name)


@router.delete("/{type_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_type(type_id: int, session: Session = Depends(get_session)):
    TypeService(session).delete_type(type_id)
    return {"message": "Type deleted"}
