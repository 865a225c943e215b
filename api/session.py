"""
Session access for the API.

The app owns exactly one FilterSession (single-user explorer), stored on
``app.state.session`` by create_app().  Routes receive it through the
get_session() dependency so tests can swap in a pre-loaded session.
"""

from fastapi import Request

from engine.session import FilterSession


def get_session(request: Request) -> FilterSession:
    """FastAPI dependency returning the app's FilterSession."""
    return request.app.state.session
