# main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi_limiter import FastAPILimiter
from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
import routes
from controller.analysis_controller import batch_validation_error
from config.cache import close_redis, get_redis
from config.settings import settings
from util.enums import Color, Environment
from util.logger import init_logger

logger = logging.getLogger(__name__)

CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
CORS_METHODS = ["GET", "POST", "PUT", "OPTIONS"]


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """Same CORS rules, but the OPTIONS preflight carries no body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        answered = super().preflight_response(request_headers)
        headers = {
            k: v
            for k, v in answered.headers.items()
            if k not in ("content-length", "content-type")
        }
        return Response(status_code=answered.status_code, headers=headers)


async def _client_ip(request: Request) -> str:
    # Rate-limit identity: first X-Forwarded-For hop behind a trusted proxy
    if settings.TRUST_PROXY:
        fwd = request.headers.get("x-forwarded-for")
        if fwd:
            return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@asynccontextmanager
async def lifespan(_: FastAPI):
    init_logger()
    print(f"{Color.GREEN}Starting hazard-rag ({settings.APP_ENV}){Color.RESET}")
    try:
        await FastAPILimiter.init(await get_redis(), identifier=_client_ip)
    except Exception as e:
        print(f"{Color.RED}Redis unavailable: {e}{Color.RESET}")
        raise

    if not settings.GEMINI_API_KEY:
        logger.warning("startup.gemini_key.missing requests must carry apiKey")
    logger.info(
        "startup.ready store=%s gen_model=%s",
        "postgrest" if settings.store_configured else "defaults",
        settings.GEMINI_GENERATION_MODEL,
    )

    try:
        yield
    finally:
        try:
            await close_redis()
        except Exception as e:
            logger.error("shutdown.redis.error err=%s", e)
        print(f"{Color.RED}hazard-rag stopped{Color.RESET}")


async def _rate_limited(request: Request, exc) -> JSONResponse:
    window = str(settings.RATE_LIMIT_SECONDS)
    return JSONResponse(
        status_code=429,
        content={
            "ok": False,
            "error": "rate_limited",
            "message": f"Too many requests. Try again in {window}s.",
        },
        headers={"Retry-After": window},
    )


def create_app() -> FastAPI:
    application = FastAPI(title="hazard-rag", lifespan=lifespan)
    # ALLOWED_ORIGIN defaults to "*"; OPTIONS preflight is answered by the middleware
    application.add_middleware(
        EmptyPreflightCORSMiddleware,
        allow_origins=[o.strip() for o in settings.ALLOWED_ORIGIN.split(",")],
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    application.add_exception_handler(429, _rate_limited)
    application.add_exception_handler(RequestValidationError, batch_validation_error)

    @application.get("/healthz")
    async def healthz():
        return {"ok": True}

    routes.register_routes(application)
    return application


app: FastAPI = create_app()

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=reload)
