import os
from datetime import datetime

import requests
import streamlit as st

from src.logging_config import logger
from src.navigation import APP_VERSION
from src.render_client import resolve_render_url, resolve_tls_verify

st.title("🔧 System Information")

st.write(f"**App Version:** {APP_VERSION}")
st.write(f"**Current Time:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
st.write(f"**Working Directory:** {os.getcwd()}")

render_url = resolve_render_url()
health_url = render_url.removesuffix("/api/render") + "/health"
st.write(f"**Render Endpoint:** `{render_url}`")

if st.button("🩺 Check API health"):
    try:
        response = requests.get(health_url, timeout=10, verify=resolve_tls_verify())
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.exception("System info: health check failed url=%s", health_url)
        st.error(f"API not reachable: {exc}")
    else:
        health = response.json()
        for key in ("rendering_configured", "storage_configured"):
            st.write(f"{'✅' if health.get(key) else '❌'} {key}")

logger.debug("Session state: %s", dict(st.session_state))
st.caption("Session state logged to terminal.")
