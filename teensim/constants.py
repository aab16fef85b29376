"""Default values shared by the configuration layer and the simulation."""

DEFAULT_MAX_TURNS = 10
DEFAULT_POLICY_MODE = "rule_based"
DEFAULT_STATE_DIR = "var"
DEFAULT_DB_NAME = "teen_memories.db"

# Memory store
DEFAULT_SHORT_TERM_CAPACITY = 20
DEFAULT_LONG_TERM_CAPACITY = 50
DEFAULT_MEMORY_DECAY_PER_DAY = 0.1
DEFAULT_RECENT_BIAS = 0.3
DEFAULT_EMOTIONAL_BIAS = 0.5
DEFAULT_IMPORTANCE_THRESHOLD = 0.7
DEFAULT_RECALL_THRESHOLD = 0.3
DEFAULT_PROMOTION_RECALLS = 2

# Emotional decay
DEFAULT_DECAY_RATE_PER_SECOND = 2.0
DEFAULT_STRESS_FLOOR = 10.0
DEFAULT_TICK_INTERVAL_SECONDS = 1.0

# Chance of the opening line mentioning a remembered moment
DEFAULT_OPENING_MEMORY_CHANCE = 0.3

# Speech
DEFAULT_SPEECH_RATE = 150
DEFAULT_SPEECH_VOLUME = 1.0

# Interview
DEFAULT_MAX_STRIKES = 3

VALID_POLICY_MODES = ("rule_based", "learned")
