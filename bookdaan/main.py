import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bookdaan.core import config
from bookdaan.database import DATABASE_UNAVAILABLE_DETAIL, Base, engine, ensure_indexes
from bookdaan.models import book, book_request, feedback, notification, user  # noqa: F401
from bookdaan.routes import (
    admin_routes,
    auth_routes,
    book_routes,
    feedback_routes,
    notification_routes,
    recommendation_routes,
    request_routes,
    user_routes,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

config.validate_runtime_config()

app = FastAPI(title='BookDaan API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_indexes()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'message': 'Invalid input', 'errors': jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception('Database error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={'detail': DATABASE_UNAVAILABLE_DETAIL},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'message': 'Internal server error'},
    )


@app.get('/')
def root():
    return {'status': 'BookDaan API Running'}


app.include_router(auth_routes.router, prefix='/api/auth')
app.include_router(user_routes.router, prefix='/api/users')
app.include_router(book_routes.router, prefix='/api/books')
app.include_router(request_routes.router, prefix='/api/requests')
app.include_router(recommendation_routes.router, prefix='/api/recommendations')
app.include_router(notification_routes.router, prefix='/api/notifications')
app.include_router(feedback_routes.router, prefix='/api/feedback')
app.include_router(admin_routes.router, prefix='/api/admin')
