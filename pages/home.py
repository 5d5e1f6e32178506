import streamlit as st

from src.logging_config import logger
from src.navigation import APP_NAME, FEATURE_PAGES
from src.render_client import resolve_render_url

st.title(f"🌐 {APP_NAME}")

st.markdown(
    """
Pick a rendering option, enter a URL and the API forwards the request to
Cloudflare Browser Rendering. PDF and markdown results are also stored in R2.
"""
)

for page_info in FEATURE_PAGES:
    if st.button(f"{page_info['icon']} {page_info['title']}", help=page_info["description"]):
        st.switch_page(page_info["path"])

st.divider()
api_url = resolve_render_url()
st.caption(f"Render endpoint: `{api_url}`")
logger.debug("Home page rendered endpoint=%s", api_url)
