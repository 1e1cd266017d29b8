from pydantic import BaseModel, Field
from typing import List, Optional

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    subject: Optional[str] = None
    via: Optional[str] = None # "password" or "access_key"

class LoginRequest(BaseModel):
    password: str

class RedeemRequest(BaseModel):
    key: str = Field(..., min_length=1)

class KeyBatchRequest(BaseModel):
    count: Optional[int] = Field(None, ge=1, le=50)

class AccessKeyBatch(BaseModel):
    keys: List[str]
