import logging
import logging.config
import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent


def _configure_logging() -> None:
    log_conf_path = Path(os.getenv("LOG_CONFIG_PATH", str(ROOT_DIR / "logging.conf")))
    log_dir = Path(os.getenv("LOG_DIR", str(ROOT_DIR / "logs")))

    if log_conf_path.exists():
        log_dir.mkdir(parents=True, exist_ok=True)
        logging.config.fileConfig(
            log_conf_path,
            disable_existing_loggers=False,
            defaults={"logdirpath": log_dir.as_posix()},
        )
    else:
        logging.basicConfig(level=logging.INFO)


_configure_logging()

# Shared by the API and the Streamlit pages
logger = logging.getLogger("render_playground")
