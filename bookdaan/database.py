import logging
from threading import Lock

from fastapi import HTTPException, status
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from bookdaan.core import config


DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'

logger = logging.getLogger(__name__)

connect_args = {'check_same_thread': False} if config.DATABASE_URL.startswith('sqlite') else {}
engine = create_engine(config.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_indexes_checked = False

INDEX_STATEMENTS = {
    'books': [
        'CREATE INDEX IF NOT EXISTS idx_books_status_created ON books(status, created_at)',
        'CREATE INDEX IF NOT EXISTS idx_books_donor ON books(donor_id)',
    ],
    'requests': [
        'CREATE INDEX IF NOT EXISTS idx_requests_book_status ON requests(book_id, status)',
        'CREATE INDEX IF NOT EXISTS idx_requests_recipient ON requests(recipient_id)',
    ],
    'notifications': [
        'CREATE INDEX IF NOT EXISTS idx_notifications_user_created ON notifications(user_id, created_at)',
    ],
}


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def database_unavailable() -> HTTPException:
    """Log the database error being handled and build the 503 response for it."""
    logger.exception('Database request failed')
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=DATABASE_UNAVAILABLE_DETAIL,
    )


def ensure_indexes(bind=None) -> None:
    global _indexes_checked

    if _indexes_checked and bind is None:
        return

    with _schema_lock:
        if _indexes_checked and bind is None:
            return

        target = bind if bind is not None else engine
        existing_tables = set(inspect(target).get_table_names())

        with target.begin() as connection:
            for table_name, statements in INDEX_STATEMENTS.items():
                if table_name not in existing_tables:
                    continue
                for statement in statements:
                    connection.execute(text(statement))

        if bind is None:
            _indexes_checked = True
