from __future__ import annotations
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..engine.errors import InvalidTaskIndex, NoPendingRoll, PendingRollConflict, ProgressionError
from ..engine.progression import ProgressionEngine
from ..schemas import CompleteTaskRequest, Course, MoveRequest, Outcome, Student
from ..stores import CourseStore, StudentStore, serialized

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/student", tags=["student"])

_engine = ProgressionEngine()


def get_engine() -> ProgressionEngine:
	return _engine


def _require_course(db: Session) -> Course:
	course = CourseStore(db).get()
	if course is None:
		raise HTTPException(status_code=404, detail="Course not found")
	return course


def _http_error(err: ProgressionError) -> HTTPException:
	if isinstance(err, InvalidTaskIndex):
		status = 400
	elif isinstance(err, (PendingRollConflict, NoPendingRoll)):
		status = 409
	else:
		status = 400
	logger.warning("rejected: %s", err)
	return HTTPException(status_code=status, detail=str(err))


@router.get("", response_model=Student)
def get_student(db: Session = Depends(get_db)):
	with serialized(db):
		student = StudentStore(db).get()
	if student is None:
		raise HTTPException(status_code=404, detail="Student not found")
	return student


@router.post("", response_model=Student)
def ensure_student(db: Session = Depends(get_db)):
	with serialized(db):
		return StudentStore(db).ensure()


@router.post("/reset", response_model=Student)
def reset_student(db: Session = Depends(get_db)):
	with serialized(db):
		return StudentStore(db).reset()


@router.post("/move", response_model=Outcome)
def move(req: Optional[MoveRequest] = None, db: Session = Depends(get_db), engine: ProgressionEngine = Depends(get_engine)):
	advance_by = req.advance_by if req else None
	with serialized(db):
		course = _require_course(db)
		with StudentStore(db).mutate() as student:
			return engine.move(course, student, advance_by)


@router.post("/complete-task", response_model=Outcome)
def complete_task(req: CompleteTaskRequest, db: Session = Depends(get_db), engine: ProgressionEngine = Depends(get_engine)):
	try:
		with serialized(db):
			course = _require_course(db)
			with StudentStore(db).mutate() as student:
				return engine.complete_task(req.task_index, course, student, req)
	except ProgressionError as err:
		raise _http_error(err) from err


@router.post("/roll-die", response_model=Outcome)
def roll_die(db: Session = Depends(get_db), engine: ProgressionEngine = Depends(get_engine)):
	try:
		with serialized(db):
			course = _require_course(db)
			with StudentStore(db).mutate() as student:
				return engine.resolve_pending_roll(course, student)
	except ProgressionError as err:
		raise _http_error(err) from err
