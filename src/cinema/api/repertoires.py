"""Repertoires (screening schedule) API endpoints"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cinema.api.deps import get_db, http_error
from cinema.schemas import (
    MessageResponse,
    RepertoireCreate,
    RepertoireResponse,
    RepertoireUpdate,
    parse_date,
)
from cinema.services import CinemaServiceError, RepertoireService

router = APIRouter()


def _query_date(value: Optional[str]):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# /repertoires/movie routes are declared before /repertoires/{repertoire_id}

@router.get("/repertoires/movie", response_model=List[RepertoireResponse])
def list_repertoires_for_movie(
    movie_id: int = Query(..., gt=0),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    db: Session = Depends(get_db),
):
    start = _query_date(start_date)
    end = _query_date(end_date)
    try:
        return RepertoireService.list_repertoires_for_movie(db, movie_id, start, end)
    except CinemaServiceError as e:
        raise http_error(e)


@router.delete("/repertoires/movie", response_model=MessageResponse)
def delete_repertoires_for_movie(
    movie_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
):
    try:
        deleted = RepertoireService.delete_repertoires_for_movie(db, movie_id)
    except CinemaServiceError as e:
        raise http_error(e)

    return MessageResponse(message=f"{deleted} repertoires have been deleted")


@router.get("/repertoires", response_model=List[RepertoireResponse])
def list_repertoires(db: Session = Depends(get_db)):
    try:
        return RepertoireService.list_repertoires(db)
    except CinemaServiceError as e:
        raise http_error(e)


@router.get("/repertoires/{repertoire_id}", response_model=RepertoireResponse)
def get_repertoire(repertoire_id: int, db: Session = Depends(get_db)):
    try:
        return RepertoireService.get_repertoire(db, repertoire_id)
    except CinemaServiceError as e:
        raise http_error(e)


@router.post("/repertoires", response_model=RepertoireResponse, status_code=201)
def create_repertoire(repertoire_data: RepertoireCreate, db: Session = Depends(get_db)):
    try:
        return RepertoireService.create_repertoire(db, repertoire_data)
    except CinemaServiceError as e:
        raise http_error(e)


@router.put("/repertoires/{repertoire_id}", response_model=RepertoireResponse)
def update_repertoire(
    repertoire_id: int,
    repertoire_data: RepertoireUpdate,
    db: Session = Depends(get_db),
):
    try:
        return RepertoireService.update_repertoire(db, repertoire_id, repertoire_data)
    except CinemaServiceError as e:
        raise http_error(e)


@router.delete("/repertoires/{repertoire_id}", response_model=MessageResponse)
def delete_repertoire(repertoire_id: int, db: Session = Depends(get_db)):
    try:
        RepertoireService.delete_repertoire(db, repertoire_id)
    except CinemaServiceError as e:
        raise http_error(e)

    return MessageResponse(message="repertoire has been deleted")
