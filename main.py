import logging
import sys

from dotenv import load_dotenv

from opdnd.config import Settings
from opdnd.errors import ValidationError
from opdnd.runner import run
from opdnd.utils.logger_config import setup_logging

if __name__ == "__main__":
    load_dotenv()
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        setup_logging()
        logging.getLogger(__name__).error(f"Invalid configuration: {e}")
        sys.exit(1)

    setup_logging(settings.log_level)
    sys.exit(run(sys.argv[1:], settings=settings))
