import logging
from typing import Union


def setup_logging(level: Union[str, int] = logging.INFO) -> None:
    """Central logging setup: one console handler on the root logger."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)

    # drop handlers left by a previous setup or by uvicorn's defaults
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
