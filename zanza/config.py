import os
from pathlib import Path
from dotenv import load_dotenv

# Always load .env from the zanza folder
load_dotenv(Path(__file__).resolve().parent / ".env")

GEOCODER_URL = os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org/search")
ROUTING_BASE_URL = os.getenv("ROUTING_BASE_URL", "https://router.project-osrm.org").rstrip("/")
ROUTING_PROFILE = os.getenv("ROUTING_PROFILE", "driving")
API_BASE_URL = os.getenv(
    "API_BASE_URL", "https://projetozanza-production.up.railway.app/api"
).rstrip("/")

CITY_NAME = os.getenv("CITY_NAME", "Campinas")
COUNTRY_NAME = os.getenv("COUNTRY_NAME", "Brazil")

# Campinas service area (south-west and north-east corners)
CITY_BOUNDS_SOUTH = float(os.getenv("CITY_BOUNDS_SOUTH", "-23.4000"))
CITY_BOUNDS_WEST = float(os.getenv("CITY_BOUNDS_WEST", "-47.5000"))
CITY_BOUNDS_NORTH = float(os.getenv("CITY_BOUNDS_NORTH", "-22.6000"))
CITY_BOUNDS_EAST = float(os.getenv("CITY_BOUNDS_EAST", "-46.7000"))

HTTP_TIMEOUT_S = float(os.getenv("HTTP_TIMEOUT_S", "10.0"))
ROUTING_TIMEOUT_S = float(os.getenv("ROUTING_TIMEOUT_S", "20.0"))

# Nominatim rejects requests without an identifying User-Agent
USER_AGENT = os.getenv("USER_AGENT", "zanza/1.0 (+https://github.com/DantinhasMD/Projeto_Zanza)")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
    ).split(",")
    if origin.strip()
]

APP_HOST = os.getenv("APP_HOST", "127.0.0.1")
APP_PORT = int(os.getenv("APP_PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
