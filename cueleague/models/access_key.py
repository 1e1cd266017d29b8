from sqlalchemy import Column, Integer, String, DateTime, Boolean
from cueleague.core.database import Base
import datetime

class AccessKey(Base):
    __tablename__ = "access_keys"

    id = Column(Integer, primary_key=True, index=True)
    key_hash = Column(String, nullable=False)
    used = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    used_at = Column(DateTime, nullable=True)
