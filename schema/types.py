from pydantic import BaseModel, StrictStr
from typing import Optional

class OCRRequest(BaseModel):
    imageBase64: StrictStr

class OCRMeta(BaseModel):
    hasFullText: bool

class OCRResult(BaseModel):
    ok: bool = True
    text: str
    meta: Optional[OCRMeta] = None
    reason: Optional[str] = None

class ExplanationOut(BaseModel):
    definition: str
    importance: str
    action: str

class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    detail: Optional[str] = None
