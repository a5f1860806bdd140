# invoice_manager/main.py

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from invoice_manager import __version__, config
from invoice_manager.api.clients import router as clients_router
from invoice_manager.api.invoices import router as invoices_router
from invoice_manager.db.engine import create_schema, get_engine

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = get_engine()
    create_schema(engine)
    logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))
    yield


app = FastAPI(
    title="Invoice Manager API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins_list(),
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(ValidationError)
async def model_validation_handler(request: Request, exc: ValidationError):
    # merged partial updates are re-validated inside the route
    errors = exc.errors(include_url=False, include_context=False)
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(errors)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    # Starlette re-raises after this response, so the server logs the traceback
    logger.error("Unhandled %s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/", response_class=PlainTextResponse)
def home():
    return "Invoice Manager Dashboard"


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(clients_router)
app.include_router(invoices_router)


def run() -> None:
    uvicorn.run("invoice_manager:app", host=config.HOST, port=config.PORT)
