from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from cueleague.core.database import Base
import datetime

class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Rules, fixed at creation. Only min_games and top_slots can be overridden.
    win_points = Column(Integer, nullable=False, default=3)
    loss_points = Column(Integer, nullable=False, default=1)
    min_games = Column(Integer, nullable=False, default=32)
    top_slots = Column(Integer, nullable=False, default=8)
    replacement_slots = Column(Integer, nullable=False, default=2)

    players = relationship("Player", back_populates="tournament")
    matches = relationship("MatchRecord", back_populates="tournament")
