#!/usr/bin/env python3
import argparse
import sys
from pathlib import Path

import requests

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from api.models.render import RenderOption  # noqa: E402
from src.render_client import BinaryPayload, resolve_render_url, submit_render, validate_form  # noqa: E402


def load_env_fallback() -> None:
    from dotenv import load_dotenv

    load_dotenv()


def describe(result) -> str:  # type: ignore[no-untyped-def]
    if isinstance(result, BinaryPayload):
        key = f" key={result.storage_key}" if result.storage_key else ""
        return f"{result.content_type} {len(result.content)} bytes{key}"
    data = result.get("data")
    size = len(data) if isinstance(data, (str, list, dict)) else 0
    key = f" key={result['r2Key']}" if result.get("r2Key") else ""
    return f"json {type(data).__name__} len={size}{key}"


def main() -> int:
    load_env_fallback()
    parser = argparse.ArgumentParser(description="Call /api/render once per rendering option.")
    parser.add_argument("url", help="Target URL to render")
    parser.add_argument("--api", default=None, help="API base URL (default: $API_BASE_URL)")
    parser.add_argument("--option", action="append", choices=[o.value for o in RenderOption])
    parser.add_argument("--prompt", default="Summarise the page in three fields.")
    args = parser.parse_args()

    endpoint = resolve_render_url(args.api)
    selected = args.option or [o.value for o in RenderOption]
    failures = 0
    for value in selected:
        form, errors = validate_form(value, args.url, args.prompt if value == "/json" else "")
        if form is None:
            print(f"[invalid] {value}: {errors}")
            return 2
        try:
            result = submit_render(form, endpoint=endpoint)
        except (requests.RequestException, ValueError) as exc:
            failures += 1
            print(f"[fail] {value}: {exc}")
            continue
        print(f"[ok]   {value}: {describe(result)}")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
