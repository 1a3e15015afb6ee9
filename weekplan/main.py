import logging
import uvicorn
from weekplan.api.api_run import app
from weekplan.utilities.config import APP_HOST, APP_PORT

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    logger.info("Weekly plan API on http://localhost:%s (Press CTRL+C to quit)", APP_PORT)
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
