from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from ..config import settings

# sqlite uses a single-connection pool, the sizing knobs only apply to server databases
engine_kwargs = {"pool_pre_ping": True}
if settings.DATABASE_URL.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    engine_kwargs.update(pool_size=10, max_overflow=20, pool_recycle=3600)
if settings.DATABASE_URL.startswith("postgresql"):
    engine_kwargs["connect_args"] = {"client_encoding": "utf8"}

engine = create_engine(settings.DATABASE_URL, echo=False, **engine_kwargs)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()
