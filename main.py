from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.attendance.routes import router as attendance_router
from app.api.events.routes import router as events_router
from app.api.feedback.routes import router as feedback_router
from app.api.notifications.routes import router as notifications_router
from app.api.registrations.routes import router as registrations_router
from app.api.users.routes import auth_router
from app.api.users.routes import router as users_router
from app.core.config import Environment, settings
from app.core.database import create_db
from app.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.ENVIRONMENT != Environment.TEST:
        create_db()
    yield


app = FastAPI(title='UMS EMaS', lifespan=lifespan)

app.include_router(attendance_router, prefix='/attendance', tags=['Attendance'])
app.include_router(auth_router, prefix='/auth', tags=['Auth'])
app.include_router(events_router, prefix='/events', tags=['Events'])
app.include_router(feedback_router, prefix='/events', tags=['Feedback'])
app.include_router(
    notifications_router, prefix='/notifications', tags=['Notifications']
)
app.include_router(
    registrations_router, prefix='/registrations', tags=['Registrations']
)
app.include_router(users_router, prefix='/users', tags=['Users'])

origins = ['*']
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error('Storage error on %s %s: %s', request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Server error'},
    )


@app.get('/', include_in_schema=False)
def ping():
    return Response(status_code=200)
