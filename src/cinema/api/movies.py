"""Movies API endpoints"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cinema.api.deps import get_db, http_error
from cinema.schemas import MessageResponse, MovieCreate, MovieResponse, MovieUpdate
from cinema.services import CinemaServiceError, MovieService

router = APIRouter()


@router.get("/movies", response_model=List[MovieResponse])
def list_movies(db: Session = Depends(get_db)):
    try:
        return MovieService.list_movies(db)
    except CinemaServiceError as e:
        raise http_error(e)


@router.get("/movies/{movie_id}", response_model=MovieResponse)
def get_movie(movie_id: int, db: Session = Depends(get_db)):
    try:
        return MovieService.get_movie(db, movie_id)
    except CinemaServiceError as e:
        raise http_error(e)


@router.post("/movies", response_model=MovieResponse, status_code=201)
def create_movie(movie_data: MovieCreate, db: Session = Depends(get_db)):
    try:
        return MovieService.create_movie(db, movie_data)
    except CinemaServiceError as e:
        raise http_error(e)


@router.put("/movies/{movie_id}", response_model=MovieResponse)
def update_movie(movie_id: int, movie_data: MovieUpdate, db: Session = Depends(get_db)):
    try:
        return MovieService.update_movie(db, movie_id, movie_data)
    except CinemaServiceError as e:
        raise http_error(e)


@router.delete("/movies/{movie_id}", response_model=MessageResponse)
def delete_movie(movie_id: int, db: Session = Depends(get_db)):
    try:
        MovieService.delete_movie(db, movie_id)
    except CinemaServiceError as e:
        raise http_error(e)

    return MessageResponse(message="Movie has been deleted")
