SERVER_VERSION = "0.1.0"

DEFAULT_ITERATIONS = 30
MAX_ITERATIONS = 2000
MAX_POINTS = 5000
