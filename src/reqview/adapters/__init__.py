"""Environment adapters: snapshot live request state into a Request."""
from reqview.adapters.starlette import close_uploads, from_starlette, request_view
from reqview.adapters.wsgi import from_wsgi

__all__ = ["from_wsgi", "from_starlette", "request_view", "close_uploads"]
