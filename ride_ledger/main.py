import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from ride_ledger.config import get_settings
from ride_ledger.db.database import Base, engine, check_db_connection
from ride_ledger.models import rides, expenses, exports  # noqa: F401 - registers the tables
from ride_ledger.api.v1.routes.rides import router as rides_router
from ride_ledger.api.v1.routes.expenses import router as expenses_router
from ride_ledger.api.v1.routes.balances import router as balances_router
from ride_ledger.api.v1.routes.exports import router as exports_router
from ride_ledger.api.v1.routes.participants import router as participants_router
from ride_ledger.utils.exceptions import ValidationError, PersistenceError, NotFoundError

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

check_db_connection()
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.app_title,
    description="Records shared car rides and expenses and derives who owes whom",
    version="1.0.0"
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": "Not found"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


app.include_router(rides_router)
app.include_router(expenses_router)
app.include_router(balances_router)
app.include_router(exports_router)
app.include_router(participants_router)


@app.get("/")
def read_root():
    return {"message": "Ride Ledger API", "version": "1.0.0"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
