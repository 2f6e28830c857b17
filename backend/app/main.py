from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import (
    activity,
    allocations,
    availability,
    courses,
    health,
    programs,
    reference,
    rooms,
    routine,
    teachers,
)
from app.core.config import get_settings
from app.core.exceptions import AppError
from app.core.log import configure_logging
from app.db.bootstrap import ensure_runtime_schema

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_runtime_schema(seed=settings.seed_reference_data)
    yield


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(reference.router, prefix=settings.api_prefix, tags=["reference"])
app.include_router(programs.router, prefix=f"{settings.api_prefix}/programs", tags=["programs"])
app.include_router(teachers.router, prefix=f"{settings.api_prefix}/teachers", tags=["teachers"])
app.include_router(courses.router, prefix=f"{settings.api_prefix}/courses", tags=["courses"])
app.include_router(rooms.router, prefix=f"{settings.api_prefix}/rooms", tags=["rooms"])
app.include_router(availability.router, prefix=f"{settings.api_prefix}/availability", tags=["availability"])
app.include_router(allocations.router, prefix=f"{settings.api_prefix}/allocations", tags=["allocations"])
app.include_router(routine.router, prefix=settings.api_prefix, tags=["routine"])
app.include_router(activity.router, prefix=settings.api_prefix, tags=["activity"])
