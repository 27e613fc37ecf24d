import logging
import time

from . import actions
from .persistence import (
    SaveStore, SaveFormatError, SaveEncodingError, current_time_ms, load_game, save_game, import_save,
)
from .state import EconomyState, clamp_tick_rate, clamp_auto_save_interval
from .ticker import TickSimulator

class Game:
    """
    Owns one EconomyState plus everything that touches it: the tick simulator,
    the save store and the settings message shown next to import/export.

    All mutation goes through the action methods below; each successful action
    is followed by a save. The host calls frame() once per animation frame and
    autosave() on its own timer.
    """

    def __init__(self, store=None, wall_clock=current_time_ms, monotonic=time.monotonic):
        self.state = EconomyState()
        self.store = store if store is not None else SaveStore()
        self.simulator = TickSimulator()
        self.wall_clock = wall_clock
        self.monotonic = monotonic
        self.last_frame = None
        self.settings_message = ""
        self.frame_errors = 0

    # --- Query ---
    def snapshot(self): return actions.snapshot(self.state)

    # --- Save/Load ---
    def save(self):
        try:
            save_game(self.state, self.store, self.wall_clock())
            return True
        except (OSError, TypeError, ValueError) as e:
            logging.error(f"Save failed: {e}", exc_info=True)
            return False

    def autosave(self):
        logging.debug("Autosaving...")
        return self.save()

    def load(self):
        logging.info(f"Loading game from {getattr(self.store, 'path', 'store')}...")
        try:
            loaded = load_game(self.store, self.wall_clock())
        except SaveFormatError as decode_e:
            logging.error(f"Load fail: Corrupt save - {decode_e}. Keeping new game.")
            return False
        except Exception as e:
            logging.error(f"Load failed: Unexpected error - {e}", exc_info=True)
            return False
        if loaded is None: return False
        self.state, _ = loaded
        self.simulator.reset()
        logging.info("Load successful.")
        return True

    def hard_reset(self):
        logging.info("Hard reset: deleting save and restoring defaults.")
        try: self.store.clear()
        except OSError as e: logging.error(f"Could not delete save: {e}")
        self.state = EconomyState()
        self.simulator.reset()

    # --- Host Callbacks ---
    def frame(self, now=None):
        """One host frame: feed elapsed time to the simulator. Never raises."""
        try:
            now = self.monotonic() if now is None else now
            elapsed = 0.0 if self.last_frame is None else max(0.0, now - self.last_frame)
            self.last_frame = now
            return self.simulator.advance(self.state, elapsed)
        except Exception as e:
            self.frame_errors += 1
            logging.error(f"Game loop error: {e}", exc_info=True)
            return 0

    # --- Actions ---
    def perform(self, name):
        func = actions.ACTIONS.get(name)
        if func is None: raise KeyError(f"Unknown action '{name}'")
        if not func(self.state): return False
        self.save()
        return True

    def buy_velocity(self): return self.perform('buy_velocity')
    def buy_acceleration(self): return self.perform('buy_acceleration')
    def buy_compression(self): return self.perform('buy_compression')
    def buy_mass_velocity(self): return self.perform('buy_mass_velocity')
    def unlock_mass_generation(self): return self.perform('unlock_mass_generation')
    def unlock_auto_upgrade(self): return self.perform('unlock_auto_upgrade')
    def unlock_triple_mass(self): return self.perform('unlock_triple_mass')
    def unlock_persistent_mass(self): return self.perform('unlock_persistent_mass')
    def unlock_dimension_collapse(self): return self.perform('unlock_dimension_collapse')
    def unlock_enhanced_dimensions(self): return self.perform('unlock_enhanced_dimensions')
    def buy_dimension(self): return self.perform('buy_dimension')
    def unit_collapse(self): return self.perform('unit_collapse')
    def dimension_collapse(self): return self.perform('dimension_collapse')

    # --- Settings ---
    def set_tick_rate(self, value):
        self.state.tick_rate = clamp_tick_rate(value)
        self.save()
        return self.state.tick_rate

    def set_auto_save_interval(self, value):
        self.state.auto_save_interval = clamp_auto_save_interval(value)
        self.save()
        return self.state.auto_save_interval

    def export_save(self):
        self.save()
        try: raw = self.store.read() or ''
        except OSError as e:
            logging.error(f"Export failed: {e}"); raw = ''
        self.settings_message = f"Exported {len(raw):,} characters." if raw else "No save found yet."
        return raw

    def import_save(self, text):
        text = (text or '').strip()
        if not text:
            self.settings_message = "Paste a save first."
            return self.settings_message
        try:
            previous = self.store.read()
            import_save(self.store, text)
        except SaveEncodingError as e:
            self.settings_message = f"Import failed: {e}."
        except SaveFormatError as e:
            self.settings_message = f"Import failed: invalid save structure ({e})."
        except OSError as e:
            logging.error(f"Import write failed: {e}")
            self.settings_message = "Import failed: could not write save."
        else:
            if self.load():
                self.settings_message = "Import successful."
            else:
                self._restore_blob(previous)
                self.settings_message = "Import failed: save could not be loaded."
        return self.settings_message

    def _restore_blob(self, blob):
        try:
            if blob is None: self.store.clear()
            else: self.store.write(blob)
        except OSError as e: logging.error(f"Could not restore previous save: {e}")
