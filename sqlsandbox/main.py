# sqlsandbox/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .db import run_artifacts
from .errors import InvalidInput, SandboxError
from .llm import generate_text
from .models import ExecutionRequest, ExecutionResult, SynthesisRequest, SynthesisResult
from .parse import parse_artifacts
from .prompt import build_prompt

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="SQL Sandbox")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# Registered after CORSMiddleware so it wraps it and runs first.
@app.middleware("http")
async def reject_unknown_origins(request: Request, call_next):
    origin = request.headers.get("origin")
    if origin and origin not in settings.allowed_origins:
        logger.warning("Rejected request from origin %s", origin)
        return JSONResponse(status_code=403, content={"error": "Not allowed by CORS"})
    return await call_next(request)


@app.exception_handler(SandboxError)
async def sandbox_error_handler(request: Request, exc: SandboxError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "An unexpected error occurred."})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"][1:])
        details.append(f"{field}: {err['msg']}" if field else err["msg"])
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body. " + "; ".join(details)},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/generate-sql", response_model=SynthesisResult)
async def generate_sql(body: SynthesisRequest):
    logger.info("Received request to /api/generate-sql")
    if not body.prompt or not body.prompt.strip():
        raise InvalidInput("Prompt is required.")

    # 1) fixed instructions + caller text
    prompt = build_prompt(body.prompt)

    # 2) LLM → raw text
    text = await generate_text(prompt)

    # 3) fences off, JSON in
    return parse_artifacts(text)


@app.post("/api/execute-sql", response_model=ExecutionResult)
def execute_sql(body: ExecutionRequest):
    # plain def: FastAPI runs it in the threadpool, one connection per call
    logger.info("Received request to /api/execute-sql")
    # same rule as the prompt: blank counts as missing
    if (
        not body.query or not body.query.strip()
        or not body.table_definition or not body.table_definition.strip()
        or body.seed_statements is None
    ):
        raise InvalidInput(
            "SQL query, CREATE TABLE statement, and INSERT data are required."
        )

    rows = run_artifacts(body.table_definition, body.seed_statements, body.query)
    return ExecutionResult(rows=rows)
