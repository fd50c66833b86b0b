# app/api/routes/catalog.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.db.base import get_db
from app.db.models.taxonomy import City, Level, Subject
from app.schemas.catalog import CityResponse, LevelResponse, SubjectResponse

router = APIRouter(prefix="/catalog", tags=["catalog"])


# Public lists used to fill booking and search forms

@router.get("/subjects", response_model=List[SubjectResponse])
def list_subjects(db: Session = Depends(get_db)):
    return db.query(Subject).filter(Subject.is_active.isnot(False)).order_by(Subject.name).all()


@router.get("/levels", response_model=List[LevelResponse])
def list_levels(db: Session = Depends(get_db)):
    return db.query(Level).filter(Level.is_active.isnot(False)).order_by(Level.id).all()


@router.get("/cities", response_model=List[CityResponse])
def list_cities(db: Session = Depends(get_db)):
    return db.query(City).filter(City.is_active.isnot(False)).order_by(City.name).all()
