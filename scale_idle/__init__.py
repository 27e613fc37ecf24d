from .config import GAME_VERSION
from .engine import Game
from .state import EconomyState

__version__ = "0.2.0"
__all__ = ["Game", "EconomyState", "GAME_VERSION"]
