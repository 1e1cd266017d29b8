from cueleague.core.database import Base

# Import all models here to ensure they are registered with Base
from .tournament import Tournament
from .player import Player
from .match import MatchRecord
from .access_key import AccessKey
