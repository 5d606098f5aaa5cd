import logging
from collections.abc import Sequence

from tic_tac_toe.factories import create_game, create_scheduler, create_ui
from tic_tac_toe.util.config import parse_config
from tic_tac_toe.util.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> None:
    config = parse_config(argv)
    setup_logging(config.log_level)
    logger.info("Starting with %s", config)

    # Build game components

    scheduler = create_scheduler(config.ui)
    setup = create_game(config, scheduler)
    ui = create_ui(config.ui, setup)

    # The engine announces the first state only once the UI can render it
    ui.add_started_cb(setup.engine.start)

    try:
        ui.start()
    finally:
        scheduler.cancel_all()
        setup.event_bus.close()


if __name__ == "__main__":
    main()
