"""
Static files example.

Demonstrates:
- Serving two directories under separate prefixes
- The default content-negotiated 404 for everything else
"""

from pathlib import Path

from expresso import App

STATIC_ROOT = Path(__file__).parent / "static"


def create_app() -> App:
    app = App()
    app.serve_static("/public", STATIC_ROOT / "public")
    app.serve_static("/private", STATIC_ROOT / "private")
    return app


if __name__ == "__main__":
    create_app().listen_and_serve()

    # Test commands:
    #   curl http://localhost:8000/public/index.html
    #   curl http://localhost:8000/private/notes.txt
    #   curl -H "Accept: application/xml" http://localhost:8000/missing
