from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Hello World!"


def hostname(host_header: str) -> str:
    """Strip a trailing ``:port`` from a ``Host`` value, keeping IPv6 brackets."""
    offset = host_header.find("]") + 1 if host_header.startswith("[") else 0
    index = host_header.find(":", offset)
    return host_header[:index] if index != -1 else host_header


@router.get("/host", response_class=PlainTextResponse)
async def host(request: Request) -> str:
    """Echo the hostname portion of the request's ``Host`` header."""
    return hostname(request.headers.get("host", ""))


def create_app() -> FastAPI:
    """Build the application served by each fixture socket."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.include_router(router)
    return app
