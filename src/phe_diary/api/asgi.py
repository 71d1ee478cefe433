"""ASGI entrypoint for the Phe Diary API."""

from phe_diary.api.app import create_app
from phe_diary.containers import build_container

app = create_app(build_container())
