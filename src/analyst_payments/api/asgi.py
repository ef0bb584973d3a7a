"""ASGI entrypoint for the analyst payments API."""

from analyst_payments.api.app import create_app
from analyst_payments.containers import build_container

app = create_app(build_container())
