"""
Mock Restaurant Application

A simulated single-restaurant food ordering API: menu, per-customer
carts with coupons, server-side billing, payment-gateway orders and
order placement. The storefront client is tested against it.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from .routes import (
    menu_router,
    restaurant_router,
    cart_router,
    coupons_router,
    orders_router,
)
from .database.restaurant import restaurant_db

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    restaurant = restaurant_db.get()
    logger.info("Mock Restaurant starting up...")
    logger.info(
        f"Serving {restaurant.name} at ({restaurant.location.lat}, {restaurant.location.lng}), "
        f"{'interstate IGST' if restaurant.interstate else 'CGST + SGST'}"
    )
    yield
    logger.info("Mock Restaurant shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Mock Restaurant",
    description="Simulated restaurant ordering API for storefront testing",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Errors are `{"message": ...}`; structured details are passed through"""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))
    return JSONResponse(status_code=422, content={"message": message})


# Include API routers
app.include_router(menu_router)
app.include_router(restaurant_router)
app.include_router(cart_router)
app.include_router(coupons_router)
app.include_router(orders_router)


@app.get("/")
async def home():
    return {
        "message": "Mock Restaurant API",
        "docs": "/docs",
        "endpoints": {
            "menu": "/api/menu",
            "restaurant": "/api/restaurant",
            "cart": "/api/cart",
            "coupons": "/api/coupons",
            "orders": "/api/orders",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "mock-restaurant"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mock_restaurant.main:app",
        host="0.0.0.0",
        port=int(os.getenv("MOCK_RESTAURANT_PORT", "8001")),
        reload=True,
    )
