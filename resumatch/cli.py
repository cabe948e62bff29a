"""Command-line helpers: model key check, catalog seeding, admin bootstrap."""
from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

from resumatch.ai.client import OpenAIModelClient
from resumatch.core.config import settings
from resumatch.core.errors import AuthError, ModelUnavailableError
from resumatch.core.logging import get_logger
from resumatch.db.models import init_db
from resumatch.db.session import SessionLocal
from resumatch.services.auth_service import AuthService
from resumatch.services.job_service import JobRepository

log = get_logger(__name__)


def _check_model(args: argparse.Namespace) -> int:
    key = settings.gemini_api_key
    if not key:
        log.error("Could not find GEMINI_API_KEY in the environment or .env")
        return 1
    log.info("Found API key (masked): %s...", key[:8])
    client = OpenAIModelClient(key)
    try:
        names = asyncio.run(client.list_models())
    except ModelUnavailableError as exc:
        log.error("%s", exc)
        return 1
    except Exception as exc:
        log.error("Listing models failed: %s", exc)
        return 1
    log.info("Available models:")
    for name in names:
        log.info("  - %s", name)
    if not any(name.endswith(settings.model_name) for name in names):
        log.warning("Configured model %s is not in the list", settings.model_name)
    return 0


def _seed_jobs(args: argparse.Namespace) -> int:
    init_db()
    with SessionLocal() as db:
        if JobRepository(db).ensure_seeded():
            log.info("Default jobs inserted.")
        else:
            log.info("Catalog already has jobs; nothing to do.")
    return 0


def _reset_jobs(args: argparse.Namespace) -> int:
    init_db()
    with SessionLocal() as db:
        jobs = JobRepository(db).reset_to_defaults()
    log.info("Catalog reset: %d jobs", len(jobs))
    return 0


def _create_admin(args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Admin password: ")
    init_db()
    with SessionLocal() as db:
        try:
            user = AuthService().ensure_admin(db, args.email, password, args.name)
        except AuthError as exc:
            log.error("Could not create admin: %s", exc)
            return 1
    log.info("Admin ready: %s (%s, role=%s)", user.email, user.id, user.role)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="resumatch", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("check-model", help="verify the API key and list available models").set_defaults(fn=_check_model)
    sub.add_parser("seed-jobs", help="insert the default jobs if the catalog is empty").set_defaults(fn=_seed_jobs)
    sub.add_parser("reset-jobs", help="replace the catalog with the default jobs").set_defaults(fn=_reset_jobs)

    admin = sub.add_parser("create-admin", help="create an admin account")
    admin.add_argument("--email", required=True)
    admin.add_argument("--password")
    admin.add_argument("--name", default="Admin")
    admin.set_defaults(fn=_create_admin)

    args = parser.parse_args(argv)
    return args.fn(args)


if __name__ == "__main__":
    sys.exit(main())
