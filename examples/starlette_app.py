"""Starlette app whose endpoints receive a reqview Request. Run: uvicorn starlette_app:app"""
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from reqview import Request, load_config_from_env, request_view

config = load_config_from_env()


async def create_post(view: Request) -> JSONResponse:
    if view.bearer_token() is None:
        return JSONResponse({"error": "unauthorized"}, status_code=401)
    return JSONResponse(
        {
            "method": view.method(),
            "data": view.only(["title", "body"]),
            "ajax": view.is_ajax(),
        }
    )


app = Starlette(routes=[Route("/posts", request_view(create_post, config), methods=["POST", "PUT"])])
