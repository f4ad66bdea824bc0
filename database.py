import logging
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.exc import SQLAlchemyError

from config import Config

logger = logging.getLogger(__name__)

Base = declarative_base()

# Bound to an engine by init_db()
SessionLocal = sessionmaker(autoflush=False)


def init_db(database_url=None):
    """Bind the session factory to ``database_url`` and create missing tables."""
    url = database_url or Config.DATABASE_URL
    engine = create_engine(url)
    SessionLocal.configure(bind=engine)

    # Import models so they are registered with Base before create_all
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized at {engine.url.render_as_string(hide_password=True)}")
    return engine


@contextmanager
def get_db_session():
    """Provide a transactional scope around a series of SQLAlchemy operations."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"SQLAlchemy Session Error: {e}")
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"General Session Error: {e}")
        raise
    finally:
        db.close()
