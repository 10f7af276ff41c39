from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from . import __version__
from .models import PrivateRouteResponse, PublicRouteResponse, ServiceStatus

PRIVATE_ROUTE_WARNING = "This route should require authentication in production"

# Main server routes
main_router = APIRouter()


@main_router.get("/", response_class=PlainTextResponse)
@main_router.get("/health", response_class=PlainTextResponse)
async def hello() -> PlainTextResponse:
    """Plaintext greeting, doubles as the health check."""
    return PlainTextResponse("Hello world!")


# Application server routes
app_router = APIRouter()


@app_router.get("/", response_model=ServiceStatus)
@app_router.get("/health", response_model=ServiceStatus)
async def root() -> ServiceStatus:
    """Service status, used for health checks."""
    return ServiceStatus(version=__version__)


@app_router.get("/public", response_model=PublicRouteResponse)
async def public_route() -> PublicRouteResponse:
    return PublicRouteResponse()


@app_router.get("/private", response_model=PrivateRouteResponse)
async def private_route() -> PrivateRouteResponse:
    """Private content. No authentication is enforced here."""
    return PrivateRouteResponse(warning=PRIVATE_ROUTE_WARNING)
