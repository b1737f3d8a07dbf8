from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, EmailStr, Field

State = Literal["idle", "submitting", "succeeded", "degraded"]

class ProductOut(BaseModel):
    id: str
    name: str
    status: Literal["present", "future"]
    summary: str
    tag: str = ""

class SessionOut(BaseModel):
    sessionId: str

class ModalEmailIn(BaseModel):
    email: EmailStr = Field(..., description="Visitor address to notify when the product is ready")

class ContactIn(BaseModel):
    name: str = Field(..., max_length=100)
    email: EmailStr = Field(..., description="Valid email address")
    message: str = Field(..., max_length=5000)

class FallbackOut(BaseModel):
    to: str
    subject: str
    body: str
    mailto: str

class SubmissionOut(BaseModel):
    state: State
    message: Optional[str] = None
    fallback: Optional[FallbackOut] = None

class ModalOut(BaseModel):
    isOpen: bool
    product: Optional[Dict[str, Any]] = None
    submission: Optional[SubmissionOut] = None

class FocusOut(BaseModel):
    sectionId: str
    found: bool
