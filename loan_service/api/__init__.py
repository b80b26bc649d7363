"""
Loan Service API Application Factory
"""

from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..exceptions import LoanServiceError
from ..logging_config import get_logger
from .customers import router as customers_router
from .loans import router as loans_router

logger = get_logger(__name__)


def error_body(
    status_code: int,
    error_code: str,
    message: str,
    path: str,
    validation_errors: Optional[List[Dict[str, str]]] = None
) -> Dict[str, Any]:
    body = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status_code,
        "error": HTTPStatus(status_code).phrase,
        "error_code": error_code,
        "message": message,
        "path": path,
    }
    if validation_errors is not None:
        body["validation_errors"] = validation_errors
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain and validation errors into the JSON error body"""

    @app.exception_handler(LoanServiceError)
    async def handle_loan_service_error(request: Request, exc: LoanServiceError):
        logger.warning("Business error %s: %s", exc.error_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, exc.error_code, exc.message, request.url.path)
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body"),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=error_body(400, "VALIDATION_ERROR", "Validation failed", request.url.path, errors)
        )

    @app.exception_handler(ValueError)
    async def handle_value_error(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content=error_body(400, "INVALID_REQUEST", str(exc), request.url.path)
        )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Loan Service API",
        description="Customer credit lines, installment loans and installment payments",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(customers_router, prefix="/api/customers", tags=["Customers"])
    app.include_router(loans_router, prefix="/api/loans", tags=["Loans"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "loan_service_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Loan Service API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "customers": "/api/customers",
                "loans": "/api/loans",
            }
        }

    return app


app = create_app()
