"""
A simple CLI for running the servers, managing the schema, and logging in
from a terminal.
"""

import asyncio
import json
import os
import sys
import time
from multiprocessing import Process

import uvicorn

USAGE = """Supported commands:
  postboard run dev|prod
  postboard migrate up|down|reset|status
  postboard register {name} {email} {password}
  postboard login {email} {password}
  postboard logout
  postboard whoami
  postboard accounts"""


def run_server(**kwargs):
    for k, v in kwargs.items():
        os.environ[k] = v

    uvicorn.run("postboard.api.app:app", host="0.0.0.0")


def run_frontend(**kwargs):
    for k, v in kwargs.items():
        os.environ[k] = v

    uvicorn.run("postboard.app.app:app", host="0.0.0.0", port=8001)


def migrate(direction: str):
    from postboard.config.settings import Settings

    runner = Settings().sync_manager().migrator()

    match direction:
        case "up":
            names = runner.migrate()
        case "down":
            names = runner.rollback()
        case "reset":
            names = runner.reset()
        case "status":
            for name, applied in runner.status():
                print(f"{'Ran' if applied else 'Pending':8} {name}")
            return
        case _:
            print(USAGE)
            exit(1)

    for name in names:
        print(name)

    if not names:
        print("Nothing to do")


async def client_command(
    command: str, arguments: list[str], settings=None, **client_kwargs
) -> int:
    """
    Run one auth store action. The cookie jar is kept in the storage file
    between invocations, so a `login` carries over to later commands.
    """
    from postboard.app.routes import ROUTES
    from postboard.config.settings import Settings
    from postboard.toolkit.client import load_cookies, save_cookies
    from postboard.toolkit.results import Failure
    from postboard.toolkit.router import Router
    from postboard.toolkit.storage import FileStorage
    from postboard.toolkit.store import AuthStore

    if settings is None:
        settings = Settings()

    store = AuthStore.from_settings(
        settings=settings,
        storage=FileStorage(settings.storage_path),
        router=Router(ROUTES),
        **client_kwargs,
    )

    load_cookies(store.client.cookies, store.storage)

    async with store.client:
        match command, arguments:
            case "register", [name, email, password]:
                result = await store.register(
                    {
                        "name": name,
                        "email": email,
                        "password": password,
                        "password_confirmation": password,
                    }
                )
            case "login", [email, password]:
                result = await store.login({"email": email, "password": password})
            case "logout", []:
                result = await store.logout()
            case "whoami", []:
                result = await store.fetch_user()
            case "accounts", []:
                result = await store.fetch_social_accounts()
            case _:
                print(USAGE)
                return 1

        save_cookies(store.client.cookies, store.storage)

    if isinstance(result, Failure):
        print(f"Error ({result.kind}): {result.message}", file=sys.stderr)
        return 1

    if result.value is not None:
        print(json.dumps(result.value, indent=2))

    if store.router.current is not None:
        print(f"-> {store.router.current.path}")

    return 0


def main():
    try:
        command = sys.argv[1]
    except IndexError:
        print(USAGE)
        exit(1)

    if command == "run":
        try:
            dev = sys.argv[2] == "dev"
            prod = sys.argv[2] == "prod"
        except IndexError:
            print(USAGE)
            exit(1)

        if dev:
            from testcontainers.postgres import PostgresContainer

            with PostgresContainer() as container:
                print(
                    f"Container details: username={container.username}, password={container.password}, port={container.get_exposed_port(container.port)}"
                )

                environment = {
                    "POSTBOARD_DATABASE_TYPE": "postgres",
                    "POSTBOARD_DATABASE_USER": container.username,
                    "POSTBOARD_DATABASE_PASSWORD": container.password,
                    "POSTBOARD_DATABASE_PORT": str(
                        container.get_exposed_port(container.port)
                    ),
                    "POSTBOARD_DATABASE_HOST": "localhost",
                    "POSTBOARD_DATABASE_DB": container.dbname,
                    "POSTBOARD_DATABASE_ECHO": "False",
                    "POSTBOARD_CREATE_EXAMPLE_USER": "True",
                }

                background_process = Process(target=run_server, kwargs=environment)
                background_process.start()

                time.sleep(1)

                frontend_process = Process(target=run_frontend, kwargs=environment)
                frontend_process.start()

                while True:
                    time.sleep(1)

        if prod:
            from postboard.api.setup import initial_setup
            from postboard.config.settings import Settings

            initial_setup(settings=Settings())

            background_process = Process(target=run_server)
            background_process.start()
            time.sleep(1)
            uvicorn.run("postboard.app.app:app", host="0.0.0.0", port=8001)

        return

    if command == "migrate":
        try:
            migrate(sys.argv[2])
        except IndexError:
            print(USAGE)
            exit(1)
        return

    exit(asyncio.run(client_command(command, sys.argv[2:])))
