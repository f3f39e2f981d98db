from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Sequence

from pydantic import BaseModel

from .client import SkillHubClient, create_client
from .errors import ApiError
from .logging_config import setup_logging
from .models import SkillListParams
from .navigation import RedirectNavigator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillhub",
        description="Browse and install skills from the SkillHub marketplace",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_cmd = subparsers.add_parser("list", help="List marketplace skills")
    list_cmd.add_argument("--page", type=int, default=None, help="Page number (1-based)")
    list_cmd.add_argument("--limit", type=int, default=None, help="Page size")
    list_cmd.add_argument("--sort", default=None, help="Sort key, e.g. stars")
    list_cmd.add_argument("--search", default=None, help="Free-text search")
    list_cmd.add_argument("--language", default=None, help="Language filter")

    show = subparsers.add_parser("show", help="Show one skill")
    show.add_argument("skill_id")

    download = subparsers.add_parser("download", help="Get a download URL for a skill")
    download.add_argument("skill_id")

    register = subparsers.add_parser("register", help="Create an account and log in")
    register.add_argument("email")
    register.add_argument("password")
    register.add_argument("--name", default=None)

    login = subparsers.add_parser("login", help="Log in and store the session token")
    login.add_argument("email")
    login.add_argument("password")

    subparsers.add_parser("logout", help="Forget the stored session token")
    subparsers.add_parser("whoami", help="Show the logged-in user")

    favorites = subparsers.add_parser("favorites", help="Manage favorite skills")
    favorites_sub = favorites.add_subparsers(dest="favorites_command", required=True)
    favorites_sub.add_parser("list", help="List favorites")
    fav_add = favorites_sub.add_parser("add", help="Favorite a skill")
    fav_add.add_argument("skill_id")
    fav_remove = favorites_sub.add_parser("remove", help="Remove a favorite")
    fav_remove.add_argument("favorite_id")

    subparsers.add_parser("health", help="Check backend health")
    subparsers.add_parser("stats", help="Show platform counters (admin)")
    return parser


async def _dispatch(client: SkillHubClient, parsed: argparse.Namespace) -> Any:
    command = parsed.command
    if command == "list":
        params = SkillListParams(
            page=parsed.page,
            limit=parsed.limit,
            sort=parsed.sort,
            search=parsed.search,
            language=parsed.language,
        )
        return await client.skills.list(params)
    if command == "show":
        return await client.skills.get(parsed.skill_id)
    if command == "download":
        return await client.skills.download(parsed.skill_id)
    if command == "register":
        return await client.auth.register(parsed.email, parsed.password, parsed.name)
    if command == "login":
        return await client.auth.login(parsed.email, parsed.password)
    if command == "logout":
        client.auth.logout()
        return {"ok": True}
    if command == "whoami":
        return await client.auth.me()
    if command == "favorites":
        if parsed.favorites_command == "list":
            return await client.favorites.list()
        if parsed.favorites_command == "add":
            return await client.favorites.add(parsed.skill_id)
        return await client.favorites.remove(parsed.favorite_id)
    if command == "health":
        return await client.system.health()
    return await client.system.stats()


async def _run(parsed: argparse.Namespace, navigator: RedirectNavigator) -> Any:
    async with create_client(navigator=navigator) as client:
        return await _dispatch(client, parsed)


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


def main(argv: Sequence[str] | None = None) -> int:
    argv_list = list(sys.argv[1:] if argv is None else argv)
    parsed = _build_parser().parse_args(argv_list)
    setup_logging()
    navigator = RedirectNavigator()
    try:
        result = asyncio.run(_run(parsed, navigator))
    except ApiError as exc:
        payload = exc.to_payload()
        if navigator.location:
            payload["error"]["redirect"] = navigator.location
            payload["error"]["hint"] = "Session expired, run `skillhub login EMAIL PASSWORD`"
        print(json.dumps(payload, ensure_ascii=False, indent=2), file=sys.stderr)
        return 1
    print(json.dumps(_to_jsonable(result), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
