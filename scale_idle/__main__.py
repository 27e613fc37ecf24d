import logging

from .config import setup_logging
from .engine import Game

def main():
    setup_logging()
    logging.info("--- Game Start ---")
    game = Game()
    game.load()
    # Imported late so the engine stays usable without a display
    from .app import GameWindow
    logging.info("Game state loaded, starting loop...")
    GameWindow(game).run()
    logging.shutdown()

if __name__ == "__main__":
    main()
