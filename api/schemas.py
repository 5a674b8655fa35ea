from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auditor.batch import BULK_MAX_URLS, BULK_MIN_URLS, COMPARE_MAX_URLS, COMPARE_MIN_URLS

# comma-separated string or a list of phrases
Keywords = Optional[Union[str, list[str]]]


def _check_http(v: str) -> str:
    v = v.strip()
    if not v.startswith(("http://", "https://")):
        raise ValueError("URL must start with http:// or https://")
    return v


class FetchPageRequest(BaseModel):
    url: str
    keywords: Keywords = None

    @field_validator("url")
    @classmethod
    def url_must_be_http(cls, v: str) -> str:
        return _check_http(v)


class ScoreRequest(BaseModel):
    """Any subset of PageSignals fields; unknown fields are accepted and ignored by the scorer."""
    model_config = ConfigDict(extra="allow")

    url: Optional[str] = None


class CompareRequest(BaseModel):
    urls: list[str] = Field(min_length=COMPARE_MIN_URLS, max_length=COMPARE_MAX_URLS)
    keywords: Keywords = None

    @field_validator("urls")
    @classmethod
    def urls_must_be_http(cls, v: list[str]) -> list[str]:
        return [_check_http(u) for u in v]


class BulkScanRequest(BaseModel):
    urls: list[str] = Field(min_length=BULK_MIN_URLS, max_length=BULK_MAX_URLS)
    keywords: Keywords = None

    @field_validator("urls")
    @classmethod
    def urls_must_be_http(cls, v: list[str]) -> list[str]:
        return [_check_http(u) for u in v]


class BatchSummary(BaseModel):
    avg_score: int
    total_issues: int
    total_high_issues: int
    scanned: int
    failed: int


class CompareResponse(BaseModel):
    ok: bool = True
    results: list[dict]


class BulkScanResponse(BaseModel):
    ok: bool = True
    results: list[dict]
    summary: BatchSummary


class HealthResponse(BaseModel):
    status: str
    cache: str  # "connected" or "unavailable"


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    status: Optional[int] = None
