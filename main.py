import sys
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.infrastructure.config import settings
from app.infrastructure.db.session import Base, engine
from app.infrastructure.db.models.user_model import UserModel  # noqa: F401
from app.infrastructure.db.models.quiz_result_model import QuizResultModel, QuizResultQuestionModel  # noqa: F401
from app.presentation.api.v1.auth_routes import router as auth_router
from app.presentation.api.v1.quiz_routes import router as quiz_router
from app.presentation.api.v1.result_routes import router as result_router
from app.presentation.dependencies import get_trivia_client

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database ready ({engine.url.get_backend_name()})")
    yield
    get_trivia_client().close()


# Initialize FastAPI app
app = FastAPI(title=settings.PROJECT_NAME, debug=settings.is_development, lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(p) for p in err["loc"] if p != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    logger.warning(f"Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"errors": errors})


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Something went wrong",
            "message": str(exc) if settings.is_development else "Internal server error",
        },
    )


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
app.include_router(quiz_router, prefix="/quiz", tags=["Quiz"])
app.include_router(result_router, prefix="/results", tags=["Results"])


@app.get("/health")
def health():
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": engine.url.get_backend_name(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.is_development)
