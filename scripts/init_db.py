"""Initialize the pet registry database."""

import structlog

from pet_registry.config import load_config
from pet_registry.logging import configure_logging


def main() -> None:
    config = load_config()
    configure_logging(config.log_level)
    logger = structlog.get_logger(__name__)
    logger.info("db.initialized", database_url=config.engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    main()
