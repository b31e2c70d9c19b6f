import logging
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import OpenAI

import config
from errors import AnalysisError
from schemas import AnalysisRequest, AnalysisResponse, ErrorResponse
from vision_module import analyze_flowchart

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/api/analyze-flowchart"

app = FastAPI(title="Flowchart Explainer Gateway")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=config.CORS_ALLOW_HEADERS,
)


def get_vision_client() -> Optional[OpenAI]:
    """Upstream client override hook; None builds a fresh client per request."""
    return None


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    logger.error("[API] Error in analyze-flowchart: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("[API] Malformed request body: %s", exc.errors())
    return JSONResponse(status_code=500, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[API] Unexpected error in analyze-flowchart")
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error"})


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok"}


@app.options(ANALYZE_PATH)
def analyze_preflight() -> Response:
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": ", ".join(config.CORS_ALLOW_HEADERS),
        },
    )


@app.post(
    ANALYZE_PATH,
    response_model=AnalysisResponse,
    responses={500: {"model": ErrorResponse}},
)
def analyze_endpoint(
    payload: AnalysisRequest = Body(...),
    client: Optional[OpenAI] = Depends(get_vision_client),
) -> AnalysisResponse:
    explanations = analyze_flowchart(payload.imageBase64, client=client)
    return AnalysisResponse(explanations=explanations)
