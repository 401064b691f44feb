# libs/contracts/job_models.py
from __future__ import annotations

import json
from enum import StrEnum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libs.adapters.errors import SignatureHeaderError


# ---- job types: closed set, every member must have a handler ----
class JobType(StrEnum):
    PROCESS_EMAIL = "processEmail"
    GENERATE_REPORT = "generateReport"
    SYNC_DATA = "syncData"
    ANALYZE_RESUME = "analyzeResume"
    DAILY_DIGEST = "dailyDigest"      # daily batch
    DATA_CLEANUP = "dataCleanup"      # daily batch


# ---- JobDescriptor: what travels through the queue provider ----
class JobDescriptor(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")
    job_type: str = Field(alias="jobType")                       # kept as str so unknown types reach the runner
    payload: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("job_type", mode="before")
    @classmethod
    def _norm_job_type(cls, v):
        s = str(v or "").strip()
        if not s:
            raise ValueError("jobType must be a non-empty string")
        return s

    @field_validator("payload", mode="before")
    @classmethod
    def _null_payload(cls, v):
        return {} if v is None else v

    def to_json(self) -> str:
        """Compact wire form: {"jobType":...,"payload":...}"""
        return json.dumps(self.model_dump(by_alias=True), separators=(",", ":"))


class EnqueueOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")
    delay_seconds: int = Field(0, ge=0, alias="delaySeconds")
    deduplication_id: Optional[str] = Field(None, alias="deduplicationId")

    @field_validator("deduplication_id", mode="before")
    @classmethod
    def _blank_dedup(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        return s or None


class EnqueueReceipt(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    message_id: str = Field(alias="messageId")
    job_type: str = Field(alias="jobType")
    delay_seconds: int = Field(0, alias="delaySeconds")
    simulated: bool = False


# ---- signature header: "signature=<base64>,timestamp=<unix>" ----
class SignatureHeader(BaseModel):
    model_config = ConfigDict(frozen=True)
    signature: str = Field(min_length=1)
    timestamp: str = Field(min_length=1)

    @classmethod
    def parse(cls, header: Optional[str]) -> "SignatureHeader":
        fields: Dict[str, str] = {}
        for part in (header or "").split(","):
            name, sep, value = part.strip().partition("=")   # first "=" only, base64 keeps its padding
            if sep:
                fields[name.strip().lower()] = value.strip()
        signature = fields.get("signature")
        timestamp = fields.get("timestamp")
        if not signature or not timestamp:
            raise SignatureHeaderError("signature header must carry signature= and timestamp=")
        return cls(signature=signature, timestamp=timestamp)


# ---- HTTP request bodies ----
class EnqueueRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")
    job_type: str = Field(alias="jobType", min_length=1)
    payload: Dict[str, Any] = Field(default_factory=dict)
    delay_seconds: int = Field(0, ge=0, alias="delaySeconds")
    deduplication_id: Optional[str] = Field(None, alias="deduplicationId")


class ScheduleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")
    job_type: str = Field(alias="jobType", min_length=1)
    payload: Dict[str, Any] = Field(default_factory=dict)
    scheduled_time: str = Field(alias="scheduledTime", min_length=1)   # ISO-8601


# ---- response contract ----
class DispatchSuccess(BaseModel):
    success: Literal[True] = True
    message: str
    result: Any = None


class DispatchFailure(BaseModel):
    success: Literal[False] = False
    message: str
    error: str


class ScheduledJobOutcome(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    job_type: str = Field(alias="jobType")
    success: bool
    result: Any = None
    error: Optional[str] = None


class ScheduledBatchReport(BaseModel):
    success: bool = True
    message: str = "Daily scheduled jobs processed"
    results: List[ScheduledJobOutcome] = Field(default_factory=list)
