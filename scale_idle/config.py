import logging
import sys
from decimal import Decimal

# --- Configuration ---
GAME_VERSION = "pre-release 0.2"
SAVE_FILE = "scale_save.dat"
LOG_FILE = "gamelog.txt"
SAVE_VERSION = 2 # 1 = legacy plain JSON, 2 = base64 JSON
DEVELOPER_MODE = False

# Simulation / host timing
DEFAULT_TICK_RATE = 60
MIN_TICK_RATE, MAX_TICK_RATE = 10, 60
DEFAULT_AUTOSAVE_INTERVAL_S = 5
MIN_AUTOSAVE_INTERVAL_S, MAX_AUTOSAVE_INTERVAL_S = 1, 60
MAX_CATCHUP_STEPS = 1000
FRAME_INTERVAL_MS = 16

# Upgrade base costs and growth factors
VELOCITY_BASE_COST = Decimal(10); VELOCITY_COST_FACTOR = Decimal("2.5")
ACCEL_BASE_COST = Decimal(1000); ACCEL_COST_FACTOR = Decimal(3)
COMPRESSION_BASE_COST = Decimal("1e7"); COMPRESSION_COST_FACTOR = Decimal(5)
MASS_VELOCITY_BASE_COST = Decimal(100); MASS_VELOCITY_COST_FACTOR = Decimal(3)
DIMENSION_BASE_COST = Decimal(1); DIMENSION_COST_INCREMENT = Decimal(1)

# Level gates for derived unlocks
ACCEL_UNLOCK_VELOCITY_LEVEL = 5
COMPRESSION_UNLOCK_ACCEL_LEVEL = 5

# Softcap breakpoints
VELOCITY_SOFTCAP_LEVEL = 5
SCALE_POINT_SOFTCAP = 5
ACCEL_SOFTCAP_LEVEL = 10

# Scale point / mass unlock prices
MASS_GENERATION_COST_SP = Decimal(1)
AUTO_UPGRADE_COST_SP = Decimal(1)
TRIPLE_MASS_COST_SP = Decimal(5)
PERSISTENT_MASS_COST_SP = Decimal(15)
DIMENSION_COLLAPSE_COST_SP = Decimal(25)
ENHANCED_DIMENSIONS_COST_MASS = Decimal("1e6")
BASE_MASS_PER_SECOND = Decimal(1)

# Prestige thresholds
UNIT_COLLAPSE_THRESHOLD = Decimal("1e9") # 1e6 km
DIMENSION_COLLAPSE_THRESHOLD = Decimal("9.461e15") # 1 ly
DIMENSION_BASE = Decimal(4)
ENHANCED_DIMENSION_BASE = Decimal(6)

# --- Logging Setup ---
def setup_logging(log_file=LOG_FILE, level=logging.INFO):
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, mode='a', encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )
