"""
Dashboard Background Configuration

Central configuration file for all constants and settings.
"""
import os

# Paths
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
SYSCONFIG_PATH = os.getenv("SYSCONFIG_PATH", os.path.join(BASE_DIR, "sysconfig.yaml"))
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(BASE_DIR, "uploads"))
PARTICLES_DIR = os.getenv("PARTICLES_DIR", os.path.join(BASE_DIR, "particles"))

# Provider endpoints
REDDIT_API_URL = "https://api.reddit.com"
UNSPLASH_RANDOM_URL = "https://api.unsplash.com/photos/random"

# Reddit listing filter
REDDIT_BATCH_SIZE = 100
REDDIT_IMAGE_DOMAINS = ("i.imgur.com", "i.redd.it")
MIN_IMAGE_WIDTH = 1000   # px, exclusive
MIN_IMAGE_HEIGHT = 800   # px, exclusive
MIN_ASPECT_RATIO = 1.1   # width / height, exclusive

# Uploaded backgrounds are served under this prefix
BACKGROUND_UPLOAD_PREFIX = "/background/"

# Expiry marker cookie
BG_IMG_COOKIE = "bgimg"

# HTTP
DEFAULT_TIMEOUT_MS = 5000
HTTP_CACHE_TTL = int(os.getenv("HTTP_CACHE_TTL", "3600"))  # seconds
HTTP_CACHE_MAX_ENTRIES = int(os.getenv("HTTP_CACHE_MAX_ENTRIES", "256"))
DEFAULT_USER_AGENT = "dashboard-background/1.0"

# Server Configuration
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
PRODUCTION_PORT = 80
