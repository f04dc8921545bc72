import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.config import get_settings
from storefront.database import init_db
from storefront.routers.auth import router as auth_router
from storefront.routers.stores import router as stores_router
from storefront.routers.products import router as products_router
from storefront.routers.product_page import router as product_page_router
from storefront.routers.categories import router as categories_router
from storefront.routers.users import router as users_router
from storefront.routers.user_country import router as user_country_router
from storefront.routers.webhooks import router as webhooks_router
from storefront.routers.cart import router as cart_router
from storefront.services.errors import ServiceError, ErrorKind

settings = get_settings()
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and initialize the database on startup."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting up... Initializing database")
    init_db()
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Storefront API",
    description="Multi-vendor storefront: stores, catalogue, product pages and shipping",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(
        status_code=ERROR_STATUS[exc.kind],
        content={"error": exc.kind.value, "detail": exc.describe(), "context": exc.context},
    )


# Include routers
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(stores_router, prefix=settings.api_prefix)
app.include_router(products_router, prefix=settings.api_prefix)
app.include_router(product_page_router, prefix=settings.api_prefix)
app.include_router(categories_router, prefix=settings.api_prefix)
app.include_router(users_router, prefix=settings.api_prefix)
app.include_router(user_country_router, prefix=settings.api_prefix)
app.include_router(webhooks_router, prefix=settings.api_prefix)
app.include_router(cart_router, prefix=settings.api_prefix)


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": "Storefront API",
        "version": "1.0.0"
    }
