"""
Basic routing example.

Demonstrates:
- One route per method and path
- Writing to the per-request logger
"""

from expresso import HTML, App, RequestContext


def reply(message: str):
    """Return a middleware that logs ``message`` and sends it as HTML."""

    async def middleware(ctx: RequestContext) -> None:
        ctx.logger.info(message)
        await ctx.response.send(HTML(message))

    return middleware


def create_app() -> App:
    app = App()
    app.get("/", reply("Hello World"))
    app.post("/", reply("Got a POST request"))
    app.put("/user", reply("Got a PUT request at /user"))
    app.delete("/user", reply("Got a DELETE request at /user"))
    return app


if __name__ == "__main__":
    create_app().listen_and_serve()

    # Test commands:
    #   curl http://localhost:8000/
    #   curl -X POST http://localhost:8000/
    #   curl -X PUT http://localhost:8000/user
    #   curl -X DELETE http://localhost:8000/user
