from __future__ import annotations
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from .settings import settings


DATABASE_URL = settings.database_url or "sqlite:///./syllaboard.db"


def make_engine(url: str):
	if not url.startswith("sqlite"):
		return create_engine(url, future=True)
	kwargs = {"connect_args": {"check_same_thread": False}, "future": True}
	# In-memory SQLite must share one connection across threads
	if url in ("sqlite://", "sqlite:///:memory:"):
		kwargs["poolclass"] = StaticPool
	return create_engine(url, **kwargs)


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


# Best-effort lightweight migrations for development (SQLite-friendly)
def ensure_schema(bind=None) -> None:
	bind = bind or engine
	try:
		inspector = inspect(bind)
		tables = set(inspector.get_table_names())
	except Exception:
		return
	if "course" in tables:
		cols = {c["name"] for c in inspector.get_columns("course")}
		with bind.begin() as conn:
			if "professor" not in cols:
				conn.exec_driver_sql("ALTER TABLE course ADD COLUMN professor VARCHAR(256) DEFAULT '' NOT NULL")
	if "student" in tables:
		cols = {c["name"] for c in inspector.get_columns("student")}
		with bind.begin() as conn:
			if "pending_json" not in cols:
				conn.exec_driver_sql("ALTER TABLE student ADD COLUMN pending_json TEXT")
