# file: PORTAL/main.py
# Run with: uvicorn PORTAL.main:app
import logging

from PORTAL.app import create_app
from PORTAL.core.config import load_config
from PORTAL.core.logger import setup_logging

config = load_config()
setup_logging(config)

logger = logging.getLogger("main")

app = create_app(config)
logger.info("Profile portal started; allowed origin %s", config.allowed_origin)
