import os
import yaml
import logging

# --- Base app settings ---
CONFIG_FILE = os.getenv("CONFIG_FILE", "config.yaml")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
APP_NAME = os.getenv("APP_NAME", "sm-libvirt")
APP_VERSION = os.getenv("APP_VERSION", "0.1")

# Initialize logger early (before setup_logging is called)
logger = logging.getLogger(APP_NAME)
if not logger.handlers:
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(message)s")


def load_yaml_config(path: str = CONFIG_FILE) -> dict:
    """Load global YAML configuration (app + libvirt)."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
            logger.info("Loaded configuration from %s", path)
            return data
    except FileNotFoundError:
        logger.warning("Configuration file not found: %s", path)
        return {}
    except yaml.YAMLError as e:
        logger.error("Error parsing YAML config (%s): %s", path, e)
        return {}


# --- Load YAML and derive app settings ---
CONFIG_YAML = load_yaml_config()

# --- Extract CORS settings ---
CORS_CONFIG = CONFIG_YAML.get("cors", {}) or {}
CORS_ORIGINS = CORS_CONFIG.get("allow_origins", [])
CORS_ALLOW_CREDENTIALS = CORS_CONFIG.get("allow_credentials", True)
CORS_ALLOW_METHODS = CORS_CONFIG.get("allow_methods", ["*"])
CORS_ALLOW_HEADERS = CORS_CONFIG.get("allow_headers", ["*"])

# Hypervisor URI used when an SR's device_config carries no "uri" key.
# None lets libvirt pick its default URI.
LIBVIRT_CONFIG = CONFIG_YAML.get("libvirt", {}) or {}
LIBVIRT_DEFAULT_URI = LIBVIRT_CONFIG.get("default_uri") or None

# Confirm loaded config summary
logger.debug(
    "LIBVIRT_DEFAULT_URI=%s, CORS_ORIGINS=%s",
    LIBVIRT_DEFAULT_URI,
    CORS_ORIGINS,
)
