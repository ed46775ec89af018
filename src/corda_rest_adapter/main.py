import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .config import settings
from .credentials import CREDENTIAL_FIELDS, StaticCredentialResolver
from .errors import ErrorCategory, StructuredError
from .logging import setup_logging, correlation_id_middleware, logger
from .operations import catalog
from .parameters import RecordParameterSource
from .router import ResourceRouter
from .schemas import ExecuteRequest, ExecuteResponse

setup_logging()
app = FastAPI(title="Corda REST Adapter", version="0.1.0")
app.middleware("http")(correlation_id_middleware)

router = ResourceRouter()

BATCHES = Counter(
    "adapter_batches_total", "Total batches executed", ["resource", "operation", "outcome"]
)
RECORDS = Counter(
    "adapter_records_total", "Records processed", ["resource", "operation", "outcome"]
)
LAT = Histogram("adapter_batch_duration_ms", "Batch duration in ms")

# HTTP status per error category
STATUS_BY_CATEGORY = {
    ErrorCategory.ROUTING: 400,
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.REMOTE_API: 502,
    ErrorCategory.TRANSPORT: 502,
    ErrorCategory.CONFIGURATION: 500,
}


@app.exception_handler(StructuredError)
async def structured_error_handler(request: Request, exc: StructuredError):
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    payload = exc.to_dict()
    payload["trace_id"] = correlation_id
    return JSONResponse(status_code=STATUS_BY_CATEGORY.get(exc.category, 500), content=payload)


@app.get("/health")
def health():
    return {"status": "ok", "service": settings.service_name}


@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/catalog")
def get_catalog():
    data = catalog()
    data["credentials"] = CREDENTIAL_FIELDS
    return data


@app.post("/execute", response_model=ExecuteResponse)
def execute(req: ExecuteRequest, request: Request):
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    parameters = dict(req.parameters)
    parameters["resource"] = req.resource
    parameters["operation"] = req.operation
    source = RecordParameterSource(parameters, req.records)

    # Credentials in the request body win over the environment
    batch_router = router
    if req.credentials is not None:
        batch_router = ResourceRouter(
            transport=router.transport,
            credential_resolver=StaticCredentialResolver(req.credentials),
        )

    logger.info(
        "execute trace_id=%s resource=%s operation=%s records=%d",
        correlation_id, req.resource, req.operation, len(req.records)
    )
    t0 = time.perf_counter()
    try:
        routed = batch_router.handle(req.records, source, continue_on_fail=req.continue_on_fail)
    except StructuredError as e:
        # Aborted batches are labelled with the raw request values.
        BATCHES.labels(resource=req.resource, operation=req.operation, outcome="error").inc()
        LAT.observe((time.perf_counter() - t0) * 1000)
        logger.warning(
            "execute aborted trace_id=%s error_type=%s", correlation_id, e.__class__.__name__
        )
        raise

    BATCHES.labels(
        resource=routed.resource.value, operation=routed.operation, outcome="success"
    ).inc()
    LAT.observe(routed.elapsed_ms)
    for record in routed.results:
        outcome = "error" if record.error else "success"
        RECORDS.labels(
            resource=routed.resource.value, operation=routed.operation, outcome=outcome
        ).inc()

    return ExecuteResponse(
        results=[r.to_dict() for r in routed.results],
        trace_id=correlation_id,
        failed=routed.failed,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("corda_rest_adapter.main:app", host="127.0.0.1", port=8000, reload=True)
