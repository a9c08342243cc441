from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from infra.database import connection
from api.routers import songs
from domain.exceptions import SongLibraryError
from utils.logger import get_logger

logger = get_logger(__name__)

# Lifespan event to handle startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    connection.init_db()  # Alembic マイグレーションを head まで適用
    yield
    connection.close_db()

app = FastAPI(
    title="Online Song Library",
    description="API for managing an online song library",
    version="1.0",
    docs_url="/swagger",
    lifespan=lifespan,
)

# エラーはすべて {"error": "..."} 形式で返す
@app.exception_handler(SongLibraryError)
async def song_library_error_handler(request: Request, exc: SongLibraryError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{location}: {err.get('msg')}")
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

# 想定外の例外も同じ形式の 500 にする
@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} raised an unhandled exception: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})

# Root endpoint for health check
@app.get("/")
async def root():
    return {"message": "Online Song Library API is running"}

# Include Routers
app.include_router(songs.router)
