from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from cueleague.core.database import Base
import datetime

class MatchRecord(Base):
    __tablename__ = "matches"
    # At most two encounters per pair of players: slots 1 and 2
    __table_args__ = (UniqueConstraint("pair_key", "encounter", name="uq_match_pair_encounter"),)

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=True, index=True)
    winner_id = Column(Integer, ForeignKey("players.id", ondelete="SET NULL"), nullable=True)
    loser_id = Column(Integer, ForeignKey("players.id", ondelete="SET NULL"), nullable=True)
    winner_name = Column(String, nullable=False)
    loser_name = Column(String, nullable=False)
    winner_score = Column(Integer, nullable=False)
    loser_score = Column(Integer, nullable=False)
    # Points actually awarded, so a reversal does not depend on current rules
    winner_points = Column(Integer, nullable=False)
    loser_points = Column(Integer, nullable=False)
    pair_key = Column(String, nullable=False, index=True)
    encounter = Column(Integer, nullable=False)
    played_at = Column(DateTime, default=datetime.datetime.utcnow, index=True)

    tournament = relationship("Tournament", back_populates="matches")
    winner = relationship("Player", foreign_keys=[winner_id])
    loser = relationship("Player", foreign_keys=[loser_id])
