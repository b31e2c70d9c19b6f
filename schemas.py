from typing import List, Optional
from pydantic import BaseModel


class AnalysisRequest(BaseModel):
    imageBase64: Optional[str] = None


class Explanation(BaseModel):
    term: str
    explanation: str


class AnalysisResponse(BaseModel):
    explanations: List[Explanation]


class ErrorResponse(BaseModel):
    error: str
