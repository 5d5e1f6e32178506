from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

from src.logging_config import logger
from src.navigation import APP_NAME, APP_VERSION, NAV_PAGES

BASE_DIR = Path(__file__).resolve().parent


def main() -> None:
    load_dotenv(dotenv_path=BASE_DIR / ".env", override=True)
    st.set_page_config(page_title=APP_NAME, page_icon="🌐", layout="wide")
    logger.info("Starting app: %s v%s", APP_NAME, APP_VERSION)

    pages = [st.Page(page["path"], title=page["title"], icon=page["icon"]) for page in NAV_PAGES]
    st.navigation(pages, position="sidebar", expanded=True).run()


if __name__ == "__main__":
    main()
