from asyncio import Runner
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse, UJSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn import Config, Server

from vocab_api.routes import router
from vocab_api.shared import build_logger
from vocab_api.shared.config import LOGGING, SERVER
from vocab_api.shared.services import services
from vocab_api.words.errors import WordError


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        await services.close()


app = FastAPI(
    debug=SERVER.DEBUG,
    title="Vocabulary API",
    description="Dictionary entries backed by PostgreSQL and Wiktionary.",
    lifespan=lifespan,
)
app.include_router(router)


@app.get(
    "/",
    name="index",
    description="Index endpoint for the Vocabulary API.",
    include_in_schema=False,
    response_class=RedirectResponse,
)
async def index(request: Request):
    return "docs"


@app.get("/health", name="health")
async def health(request: Request):
    return {"status": "ok"}


@app.exception_handler(WordError)
async def word_exception_handler(request: Request, exc: WordError):
    if exc.status_code >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc.detail)
    else:
        logger.debug("{} {} rejected: {}", request.method, request.url.path, exc.detail)

    return UJSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return UJSONResponse({"error": jsonable_encoder(exc.errors())}, status_code=400)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 500:
        logger.exception(exc)
        return UJSONResponse(
            {"error": "An internal server error occurred."},
            status_code=500,
        )

    return UJSONResponse(
        {
            "error": exc.detail,
        },
        status_code=exc.status_code,
    )


async def startup(server: Server):
    await services.setup(app)
    await server.serve()


if __name__ == "__main__":
    config = Config(
        app=app,
        access_log=True,
        host=SERVER.HOST,
        port=SERVER.PORT,
        log_config={
            "version": 1,
            "disable_existing_loggers": False,
            "loggers": {"uvicorn": {"level": LOGGING.LEVEL}},
        },
    )
    server = Server(config)
    with Runner() as runner:
        emitter = build_logger("vocab-api", LOGGING.LEVEL)
        try:
            runner.run(startup(server))
        finally:
            emitter.shutdown()
