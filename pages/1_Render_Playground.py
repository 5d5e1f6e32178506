import uuid

import requests
import streamlit as st
import streamlit.components.v1 as components

from api.models.render import RenderOption
from src.logging_config import logger
from src.render_client import (
    DEFAULT_OPTION,
    REQUEST_TIMEOUT_SECONDS,
    BinaryPayload,
    preview_for,
    resolve_render_url,
    resolve_tls_verify,
    submit_render,
    validate_form,
)

API_URL = resolve_render_url()
API_TLS_VERIFY = resolve_tls_verify()
OPTION_VALUES = [option.value for option in RenderOption]

RESPONSE_KEY = "render_response"
REQUEST_KEY = "render_request"
FORM_KEYS = ("render_option", "render_url", "render_prompt")


def _reset_form() -> None:
    st.session_state["render_option"] = DEFAULT_OPTION.value
    st.session_state["render_url"] = ""
    st.session_state["render_prompt"] = ""
    st.session_state.pop(RESPONSE_KEY, None)
    st.session_state.pop(REQUEST_KEY, None)


for key in FORM_KEYS:
    if key not in st.session_state:
        _reset_form()
        break


st.title("🌐 Browser Rendering")
st.caption("Experiment with the Cloudflare Browser Rendering API.")

with st.form("render_form"):
    option_value = st.selectbox(
        "Rendering Option",
        OPTION_VALUES,
        key="render_option",
        format_func=lambda value: f"{value}: {RenderOption(value).description}",
    )
    option_error = st.empty()

    url_value = st.text_input("URL", key="render_url", placeholder="https://example.com")
    url_error = st.empty()

    prompt_value = st.text_area(
        "Prompt (optional)",
        key="render_prompt",
        placeholder="Get me the list of AI products",
        help="Only used by /json.",
        height=120,
    )

    submitted = st.form_submit_button("Submit", type="primary")

st.button("Reset", on_click=_reset_form)

if submitted:
    form, errors = validate_form(option_value, url_value, prompt_value)
    if "option" in errors:
        option_error.error(errors["option"])
    if "url" in errors:
        url_error.error(errors["url"])

    if form is not None:
        request_id = str(uuid.uuid4())
        st.session_state[REQUEST_KEY] = {"option": form.option.value, "url": form.url}
        st.session_state[RESPONSE_KEY] = None
        with st.spinner("Rendering..."):
            try:
                st.session_state[RESPONSE_KEY] = submit_render(
                    form,
                    endpoint=API_URL,
                    timeout=REQUEST_TIMEOUT_SECONDS,
                    verify=API_TLS_VERIFY,
                    request_id=request_id,
                )
            except (requests.RequestException, ValueError) as exc:
                logger.exception("Render playground: request failed request_id=%s", request_id)
                st.session_state[RESPONSE_KEY] = None
                st.toast(f"Something went wrong: {exc.__class__.__name__}", icon="⚠️")

current_request = st.session_state.get(REQUEST_KEY)
current_response = st.session_state.get(RESPONSE_KEY)

if current_request and current_response is not None:
    option = RenderOption(current_request["option"])
    preview = preview_for(option, current_request["url"], current_response)

    st.subheader("Preview")
    if isinstance(current_response, BinaryPayload) and current_response.storage_key:
        st.caption(f"Stored as `{current_response.storage_key}`")
    elif isinstance(current_response, dict) and current_response.get("r2Key"):
        st.caption(f"Stored as `{current_response['r2Key']}`")

    if preview.kind == "live_url":
        components.iframe(preview.source, height=600, scrolling=True)
    elif preview.kind == "image":
        st.image(preview.source)
        st.download_button("Download", preview.source, file_name=preview.filename, mime="image/png")
    elif preview.kind == "pdf_frame":
        components.html(
            f'<iframe src="{preview.source}" width="100%" height="780"></iframe>',
            height=800,
        )
        st.download_button(
            "Download",
            current_response.content,
            file_name=preview.filename,
            mime="application/pdf",
        )
    else:
        st.code(preview.source, language=preview.language)
        st.download_button("Download", preview.source, file_name=preview.filename)
