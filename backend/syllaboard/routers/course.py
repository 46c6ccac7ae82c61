from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..engine.path import build_path_vector
from ..schemas import Course
from ..settings import settings
from ..stores import CourseStore, serialized

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/course", tags=["course"])


@router.get("", response_model=Course)
def get_course(db: Session = Depends(get_db)):
	with serialized(db):
		course = CourseStore(db).get()
	if course is None:
		raise HTTPException(status_code=404, detail="Course not found")
	return course


@router.post("", response_model=Course)
def save_course(course: Course, db: Session = Depends(get_db)):
	# Course is replaced wholesale; a board is generated when none was authored
	if not course.path_vector and course.tasks:
		course.path_vector = build_path_vector(
			course.tasks,
			cells_per_task=settings.path_cells_per_task,
			reward_min=settings.reward_min,
			reward_max=settings.reward_max,
		)
		logger.info("generated path of %s cells for %s tasks", course.path_length, len(course.tasks))
	with serialized(db):
		return CourseStore(db).save(course)
