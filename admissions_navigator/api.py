"""HTTP API for a browser front end.

The server is stateless: the browser keeps the questionnaire state and
posts it here for validation, record extraction and analysis.
"""

import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .analysis.agent import AnalysisAgent, AnalysisError
from .analysis.schemas import AnalysisReport
from .extraction.agent import ExtractionError, RecordExtractionAgent
from .intake.files import UnsupportedImageError, image_payload_from_bytes
from .intake.flow import Step, step_completion
from .intake.schemas import Location, ManualAcademicRecord, StudentInfo
from .report.views import TAB_IDS, render_tab

load_dotenv()

logger = logging.getLogger(__name__)

app = FastAPI(title="Admissions Navigator", version="0.1.0")

allow_origins = os.getenv("ADMISSIONS_NAVIGATOR_ALLOW_ORIGINS", "http://localhost:5173").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "VALIDATION_ERROR", "detail": jsonable_encoder(exc.errors())},
    )


# --- request / response shapes ---

class AnalyzeRequest(BaseModel):
    student_info: StudentInfo
    location: Optional[Location] = None


class ExtractResponse(BaseModel):
    student_name: str
    manual_record: ManualAcademicRecord


class StepCompletionResponse(BaseModel):
    steps: Dict[str, bool]
    progress: float


class RenderedTab(BaseModel):
    tab: str
    text: str


# --- dependencies ---

_extraction_agent: Optional[RecordExtractionAgent] = None
_analysis_agent: Optional[AnalysisAgent] = None


def get_extraction_agent() -> RecordExtractionAgent:
    global _extraction_agent
    if _extraction_agent is None:
        _extraction_agent = RecordExtractionAgent()
    return _extraction_agent


def get_analysis_agent() -> AnalysisAgent:
    global _analysis_agent
    if _analysis_agent is None:
        _analysis_agent = AnalysisAgent()
    return _analysis_agent


# --- endpoints ---

@app.get("/")
async def health():
    return {"status": "ok", "service": "admissions-navigator"}


@app.post("/onboarding/validate", response_model=StepCompletionResponse)
def validate_onboarding(info: StudentInfo):
    """Report which questionnaire steps are complete."""
    completion = step_completion(info)
    # Progress is that of the first step still open, as the questionnaire shows it.
    reached = next((step for step in Step if not completion[step]), Step.LOCATION)
    return StepCompletionResponse(
        steps={step.name.lower(): done for step, done in completion.items()},
        progress=reached / len(Step) * 100,
    )


@app.post("/extract", response_model=ExtractResponse)
def extract_record(
    file: UploadFile = File(...),
    agent: RecordExtractionAgent = Depends(get_extraction_agent),
):
    try:
        image = image_payload_from_bytes(file.file.read(), file.content_type)
    except UnsupportedImageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        student_name, record = agent.extract(image)
    except ExtractionError as e:
        return JSONResponse(status_code=502, content={"error": "EXTRACTION_FAILED", "message": str(e)})

    return ExtractResponse(student_name=student_name, manual_record=record)


@app.post("/analyze", response_model=AnalysisReport)
def analyze(
    request: AnalyzeRequest,
    agent: AnalysisAgent = Depends(get_analysis_agent),
):
    logger.info("Analysis requested (location=%s)", request.location is not None)
    try:
        return agent.analyze(request.student_info, request.location)
    except AnalysisError as e:
        return JSONResponse(status_code=502, content={"error": "ANALYSIS_FAILED", "message": str(e)})


@app.post("/report/{tab}", response_model=RenderedTab)
def render_report_tab(tab: str, report: AnalysisReport):
    if tab not in TAB_IDS:
        raise HTTPException(status_code=404, detail=f"Unknown tab {tab!r}")
    return RenderedTab(tab=tab, text=render_tab(report, tab))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))
