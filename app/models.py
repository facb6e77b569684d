"""Pydantic models for the analyze endpoint.

Field names are camelCase because they are the JSON contract the
studio frontend already reads.
"""

from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field


class MixFeedback(BaseModel):
    mixSummary: str
    recommendations: List[str]


class AnalysisMetrics(BaseModel):
    rms: str
    peak: str
    dynamicRange: str
    lufs: str
    stereoWidth: Union[int, float]


class AnalyzeResponse(BaseModel):
    analysis: AnalysisMetrics
    feedback: MixFeedback
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: str
