"""
Route handlers.

A handler is any callable taking ``(request, response)`` that finalizes
the response, usually through one of its setters:

    def hello(request, response):
        response.set_json(200, {"message": "Hi"})

``demo`` holds the sample API registered by ``create_app()``.
"""

from . import demo

__all__ = ["demo"]
