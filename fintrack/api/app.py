"""
HTTP boundary for the ledger.

Every route except /health needs an ``Authorization: Bearer <token>``
header. The identity dependency runs before the request body is looked
at, so an unauthenticated caller learns nothing about validation.

Each LedgerError kind maps to its own status and code:

    unauthenticated     401
    invalid_credential  401 (WWW-Authenticate: Bearer error="invalid_token")
    validation_error    422
    not_found           404
    forbidden           403
    store_failure       503
"""

from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fintrack import __version__
from fintrack.aggregation import engine
from fintrack.errors import (
    InvalidCredentialError,
    LedgerError,
    UnauthenticatedError,
    ValidationError,
)
from fintrack.models.transaction import (
    Dashboard,
    DeleteAck,
    Identity,
    Money,
    MonthlyTotals,
    Summary,
    Transaction,
    TransactionType,
    ValidationIssue,
)
from fintrack.orchestrator import AppComponents, create_app_components
from fintrack.services.identity import extract_bearer_token


def error_response(exc: LedgerError) -> JSONResponse:
    """Render a LedgerError as its stable outward signal."""
    headers = None
    if isinstance(exc, InvalidCredentialError):
        headers = {"WWW-Authenticate": 'Bearer error="invalid_token"'}
    elif isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.to_dict()},
        headers=headers,
    )


def request_validation_issues(exc: RequestValidationError) -> list[ValidationIssue]:
    issues = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        issues.append(ValidationIssue(
            field=loc[0] if loc else "body",
            issue_type="invalid_value",
            message=err.get("msg", "Invalid request"),
        ))
    return issues


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


async def current_identity(
    components: AppComponents = Depends(get_components),
    authorization: Optional[str] = Header(None),
) -> Identity:
    """Verify the bearer credential; the resulting owner id scopes the request."""
    try:
        token = extract_bearer_token(authorization)
        return components.verifier.verify(token)
    except (UnauthenticatedError, InvalidCredentialError) as e:
        components.audit_logger.log_authentication_failed(e.code, e.message)
        raise


def create_api(components: Optional[AppComponents] = None) -> FastAPI:
    """
    Build the FastAPI application around a set of components.

    The store is closed when the application shuts down.
    """
    if components is None:
        components = create_app_components()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await components.shutdown()

    app = FastAPI(
        title="Fintrack Ledger API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.components = components
    app.add_middleware(
        CORSMiddleware,
        allow_origins=components.settings.app.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return error_response(ValidationError(request_validation_issues(exc)))

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # Aggregate views are registered before /transactions/{transaction_id}
    # so their paths are not captured as ids.

    @app.get("/transactions/summary", response_model=Summary)
    async def transaction_summary(identity: Identity = Depends(current_identity)):
        records = await components.ledger.list(identity.owner_id)
        return engine.summary(records)

    @app.get("/transactions/by-category", response_model=dict[str, Money])
    async def transactions_by_category(
        type: Optional[TransactionType] = None,
        identity: Identity = Depends(current_identity),
    ) -> dict[str, Decimal]:
        records = await components.ledger.list(identity.owner_id)
        return engine.by_category(records, type=type)

    @app.get("/transactions/by-month", response_model=list[MonthlyTotals])
    async def transactions_by_month(
        chronological: bool = False,
        identity: Identity = Depends(current_identity),
    ):
        records = await components.ledger.list(identity.owner_id)
        return engine.by_month(records, chronological=chronological)

    @app.get("/transactions/dashboard", response_model=Dashboard)
    async def transactions_dashboard(
        chronological: bool = False,
        identity: Identity = Depends(current_identity),
    ):
        return await components.ledger.dashboard(identity.owner_id, chronological=chronological)

    @app.post("/transactions", response_model=Transaction, status_code=201)
    async def create_transaction(
        fields: Any = Body(...),
        identity: Identity = Depends(current_identity),
    ):
        return await components.ledger.create(identity.owner_id, fields)

    @app.get("/transactions", response_model=list[Transaction])
    async def list_transactions(identity: Identity = Depends(current_identity)):
        return await components.ledger.list(identity.owner_id)

    @app.get("/transactions/{transaction_id}", response_model=Transaction)
    async def get_transaction(
        transaction_id: str,
        identity: Identity = Depends(current_identity),
    ):
        return await components.ledger.get(transaction_id, identity.owner_id)

    @app.put("/transactions/{transaction_id}", response_model=Transaction)
    async def update_transaction(
        transaction_id: str,
        fields: Any = Body(...),
        identity: Identity = Depends(current_identity),
    ):
        return await components.ledger.update(transaction_id, identity.owner_id, fields)

    @app.delete("/transactions/{transaction_id}", response_model=DeleteAck)
    async def delete_transaction(
        transaction_id: str,
        identity: Identity = Depends(current_identity),
    ):
        return await components.ledger.delete(transaction_id, identity.owner_id)

    return app
