"""Halls API endpoints"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cinema.api.deps import get_db, http_error
from cinema.schemas import HallCreate, HallResponse, HallUpdate, MessageResponse
from cinema.services import CinemaServiceError, HallService

router = APIRouter()


@router.get("/halls", response_model=List[HallResponse])
def list_halls(db: Session = Depends(get_db)):
    try:
        return HallService.list_halls(db)
    except CinemaServiceError as e:
        raise http_error(e)


@router.get("/halls/{name}", response_model=List[HallResponse])
def search_halls(name: str, db: Session = Depends(get_db)):
    """Halls whose name contains `name`, case-insensitively"""
    try:
        return HallService.search_halls(db, name)
    except CinemaServiceError as e:
        raise http_error(e)


@router.post("/halls", response_model=HallResponse, status_code=201)
def create_hall(hall_data: HallCreate, db: Session = Depends(get_db)):
    try:
        return HallService.create_hall(db, hall_data)
    except CinemaServiceError as e:
        raise http_error(e)


@router.put("/halls/{hall_id}", response_model=HallResponse)
def update_hall(hall_id: int, hall_data: HallUpdate, db: Session = Depends(get_db)):
    try:
        return HallService.update_hall(db, hall_id, hall_data)
    except CinemaServiceError as e:
        raise http_error(e)


@router.delete("/halls/{hall_id}", response_model=MessageResponse)
def delete_hall(hall_id: int, db: Session = Depends(get_db)):
    """Delete a hall together with its screenings (refused while any has reservations)"""
    try:
        HallService.delete_hall(db, hall_id)
    except CinemaServiceError as e:
        raise http_error(e)

    return MessageResponse(message="Hall has been deleted")
