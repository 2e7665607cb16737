from enum import Enum

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.errors import PyMongoError

from src.api.routes.challenges import router as challenges_router
from src.api.routes.user_challenges import router as user_challenges_router
from src.config import CORS_ORIGINS, HOST, PORT
from src.database import connect, disconnect, ping
from src.exceptions import AppError, DependencyUnavailable
from src.repositories.user_challenge_repository import UserChallengeRepository
from src.utils.constants import ROOT_MESSAGE
from src.utils.logging import setup_logging

logger = setup_logging()
app = FastAPI(title="EcoTrack API")


# tag enums
class Tags(Enum):
    challenges = "Challenges"
    user_challenges = "User Challenges"


# Include routes
app.include_router(challenges_router, prefix="/challenges", tags=[Tags.challenges])
app.include_router(user_challenges_router, prefix="/user-challenges", tags=[Tags.user_challenges])

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.exception(f"Database error on {request.method} {request.url.path}: {exc}")
    error = DependencyUnavailable()
    return JSONResponse(status_code=error.status_code, content={"message": error.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.get("/", response_class=PlainTextResponse)
async def root():
    return ROOT_MESSAGE


@app.on_event("startup")
async def startup_event():
    db = connect(app)
    if await ping(app.state.mongo_client):
        try:
            await UserChallengeRepository(db).ensure_indexes()
        except PyMongoError as e:
            # existing duplicate enrollments block the unique index
            logger.error(f"Could not create user challenge indexes: {e}")
    logger.info(f"🌿 EcoTrack Server running on port {PORT}")


@app.on_event("shutdown")
async def shutdown_event():
    disconnect(app)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
