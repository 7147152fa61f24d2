"""Reservations API endpoints"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from cinema.api.deps import get_db, http_error
from cinema.schemas import (
    MessageResponse,
    ReservationCreate,
    ReservationCreatedResponse,
    ReservationResponse,
)
from cinema.services import CinemaServiceError, ReservationService

router = APIRouter()


@router.post("/reservation", response_model=ReservationCreatedResponse, status_code=201)
def create_reservation(
    reservation_data: ReservationCreate,
    idempotency_key: Optional[str] = Header(None, alias="X-Idempotency-Key", max_length=255),
    db: Session = Depends(get_db),
):
    """
    Reserve seats on a screening

    Headers:
    - X-Idempotency-Key: Optional key; repeating it returns the original reservation
    """
    try:
        reservation = ReservationService.create_reservation(
            db=db,
            username=reservation_data.username,
            movie_id=reservation_data.movie_id,
            date=reservation_data.date,
            time=reservation_data.time,
            hall=reservation_data.hall,
            seats=reservation_data.reserv_seats,
            idempotency_key=idempotency_key,
        )
    except CinemaServiceError as e:
        raise http_error(e)

    return ReservationCreatedResponse(
        message="Reservation added successfully",
        reservation=ReservationResponse.model_validate(reservation),
    )


@router.delete("/reservation/{reservation_id}", response_model=MessageResponse)
def cancel_reservation(reservation_id: int, db: Session = Depends(get_db)):
    """Cancel a reservation and release its seats"""
    try:
        ReservationService.cancel_reservation(db=db, reservation_id=reservation_id)
    except CinemaServiceError as e:
        raise http_error(e)

    return MessageResponse(message="Reservation canceled successfully")


@router.get("/reservationforuser", response_model=List[ReservationResponse])
def list_reservations_for_user(
    username: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """All reservations of a user, newest first"""
    try:
        return ReservationService.list_reservations_for_user(db=db, username=username)
    except CinemaServiceError as e:
        raise http_error(e)
