from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from cueleague.core.database import Base
import datetime

class Player(Base):
    __tablename__ = "players"
    __table_args__ = (UniqueConstraint("tournament_id", "name", name="uq_player_name_per_tournament"),)

    id = Column(Integer, primary_key=True, index=True)
    # NULL means the club-wide league
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)

    # Ledger. Only ever changed through ledger_service.apply_increment.
    points = Column(Integer, nullable=False, default=0)
    wins = Column(Integer, nullable=False, default=0)
    losses = Column(Integer, nullable=False, default=0)
    games_played = Column(Integer, nullable=False, default=0)
    score_units = Column(Integer, nullable=False, default=0)

    tournament = relationship("Tournament", back_populates="players")


# NULLs never collide in the constraint above, so the club league gets its own index
Index(
    "uq_player_name_club",
    Player.name,
    unique=True,
    sqlite_where=Player.tournament_id.is_(None),
    postgresql_where=Player.tournament_id.is_(None),
)
