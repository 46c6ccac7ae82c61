import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from .db import Base, engine, get_db, ensure_schema
from .logger import configure_logging
from .settings import settings
from .stores import CourseStore, serialized
from .routers import health
from .routers import course
from .routers import student

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.include_router(health.router)
app.include_router(course.router)
app.include_router(student.router)

app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.cors_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)


@app.get("/info")
def root(db: Session = Depends(get_db)):
	with serialized(db):
		configured = CourseStore(db).get() is not None
	return {"status": "ok", "app": settings.app_name, "course_configured": configured}


@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	Base.metadata.create_all(bind=engine)
	# Apply lightweight dev migrations
	try:
		ensure_schema()
	except Exception:
		logger.exception("schema migration failed")
	logger.info("%s ready (database=%s)", settings.app_name, engine.url.render_as_string(hide_password=True))
