"""
Web service example.

Demonstrates:
- API key authentication in front of every route
- Route parameters
- Decoding JSON, XML and form bodies
- A custom content-negotiated not-found handler
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from xml.etree import ElementTree

from expresso import (
    HTML,
    JSON,
    XML,
    YAML,
    APIKeyAuthentication,
    App,
    Formatted,
    RequestContext,
    Text,
)

# ========== Domain Models ==========


@dataclass(frozen=True)
class Repo:
    name: str
    url: str


@dataclass(frozen=True)
class User:
    name: str


@dataclass
class Repository:
    """In-memory store shared by the handlers of one app."""

    api_keys: set[str] = field(default_factory=set)
    users: list[User] = field(default_factory=list)
    repos: list[Repo] = field(default_factory=list)
    user_repos: dict[str, list[Repo]] = field(default_factory=dict)

    @classmethod
    def seeded(cls) -> Repository:
        repos = [
            Repo("validation_chain", "https://github.com/pr47h4m/validation_chain"),
            Repo("expresso", "https://github.com/pr47h4m/expresso"),
        ]
        return cls(
            api_keys={"foo", "bar", "baz"},
            users=[User("pr47h4m"), User("gautam")],
            repos=repos,
            user_repos={"pr47h4m": list(repos), "gautam": []},
        )

    async def validate_key(self, key: str) -> str | None:
        return key if key in self.api_keys else None

    def find_user(self, name: str) -> User | None:
        return next((u for u in self.users if u.name == name), None)

    def add_user(self, user: User) -> None:
        self.users.append(user)
        self.user_repos[user.name] = []


# ========== Body Decoding ==========


class InvalidBody(ValueError):
    pass


def decode_user(ctx: RequestContext) -> User:
    content_type = ctx.request.content_type
    body = ctx.request.body
    try:
        if content_type == "application/json":
            name = json.loads(body).get("name", "")
        elif content_type == "application/xml":
            name = ElementTree.fromstring(body).findtext("Name", "")
        elif content_type == "application/x-www-form-urlencoded":
            name = ctx.request.query_params.get("name", "")
        else:
            raise InvalidBody(f"invalid content type: {content_type}")
    except (ValueError, AttributeError, ElementTree.ParseError) as exc:
        raise InvalidBody(str(exc)) from exc
    if not isinstance(name, str) or not name:
        raise InvalidBody("missing user name")
    return User(name)


# ========== Handlers ==========

BANNER = (
    "<html><head><title>Web Service in Python</title></head>"
    "<body><h1>Web Service in Python</h1><h3>powered by expresso</h3></body></html>"
)


def create_app(repository: Repository | None = None) -> App:
    repository = repository or Repository.seeded()
    auth = APIKeyAuthentication(repository.validate_key)

    async def index(ctx: RequestContext) -> None:
        await ctx.response.send(HTML(BANNER))

    async def get_users(ctx: RequestContext) -> None:
        users = [asdict(u) for u in repository.users]
        await ctx.response.send(JSON({"status": "200", "users": users}))

    async def create_user(ctx: RequestContext) -> None:
        ctx.logger.debug(f"body: {ctx.request.body.decode(errors='replace')}")
        ctx.logger.debug(f"query params: {ctx.request.query_params}")
        try:
            user = decode_user(ctx)
        except InvalidBody as exc:
            ctx.logger.error(f"error decoding user: {exc}")
            ctx.response.send_status(400)
            return
        repository.add_user(user)
        await ctx.response.status(201).send(
            JSON({"status": "201", "user": asdict(user)})
        )

    async def get_repos(ctx: RequestContext) -> None:
        repos = [asdict(r) for r in repository.repos]
        await ctx.response.send(JSON({"status": "200", "repos": repos}))

    async def get_user_repos(ctx: RequestContext) -> None:
        user = repository.find_user(ctx.request.params.by_name("name"))
        if user is None:
            await ctx.response.status(404).send(
                JSON({"status": "404", "error": "username not found"})
            )
            return
        repos = [asdict(r) for r in repository.user_repos[user.name]]
        await ctx.response.send(JSON({"status": "200", "repos": repos}))

    async def not_found(ctx: RequestContext) -> None:
        data = {"status": 404, "error": "Not Found"}
        await ctx.response.status(404).formatted(
            Formatted(
                text=Text("404 - Not Found"),
                html=HTML(
                    "<html><head><title>404 - Not Found</title></head>"
                    "<body>404 - Not Found</body></html>"
                ),
                json=JSON(data),
                xml=XML(data, root="error"),
                yaml=YAML(data),
                default=JSON(data),
            )
        )

    app = App()
    app.get("/api", auth, index)
    app.get("/api/users", auth, get_users)
    app.post("/api/users", auth, create_user)
    app.get("/api/repos", auth, get_repos)
    app.get("/api/users/{name}/repos", auth, get_user_repos)
    app.handle_not_found(not_found)
    return app


if __name__ == "__main__":
    create_app().listen_and_serve()

    # Test commands:
    #   curl -H "api-key: foo" http://localhost:8000/api/users
    #   curl "http://localhost:8000/api/repos?api-key=bar"
    #   curl -H "api-key: foo" http://localhost:8000/api/users/gautam/repos
    #   curl -H "api-key: foo" -H "Accept: application/xml" http://localhost:8000/api
    #   curl -X POST -H "api-key: foo" -H "Content-Type: application/json" \
    #     -d '{"name": "ada"}' http://localhost:8000/api/users
    #   curl -X POST -H "api-key: foo" -d "name=grace" http://localhost:8000/api/users
    #   curl -H "Accept: text/yaml" http://localhost:8000/nowhere
