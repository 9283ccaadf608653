"""
Hello world example.

Demonstrates:
- Creating an App
- Registering a single GET route
- Sending an HTML payload
"""

from expresso import HTML, App, RequestContext


async def hello(ctx: RequestContext) -> None:
    await ctx.response.send(HTML("Hello World"))


def create_app() -> App:
    app = App()
    app.get("/", hello)
    return app


if __name__ == "__main__":
    create_app().listen_and_serve()

    # Test commands:
    #   curl http://localhost:8000/
