import os

NASA_API_KEY = os.getenv("NASA_API_KEY", "DEMO_KEY")
NASA_NEO_API = os.getenv("NASA_NEO_API", "https://api.nasa.gov/neo/rest/v1")
JPL_CAD_API = os.getenv("JPL_CAD_API", "https://ssd-api.jpl.nasa.gov/cad.api")

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "20"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Heuristic thresholds, not derived from any risk model.
VERY_CLOSE_AU = float(os.getenv("VERY_CLOSE_AU", "0.05"))
ELEVATED_LUNAR_DISTANCE = float(os.getenv("ELEVATED_LUNAR_DISTANCE", "5"))
