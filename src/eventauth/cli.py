"""Command-line interface for EventAuth.

This module provides the CLI commands for running and managing
the EventAuth service.
"""

import asyncio
from typing import NoReturn

import click

from eventauth.core.config import DEFAULT_PASSWORD_SALT, DEFAULT_TOKEN_SECRET, get_settings
from eventauth.core.logging import configure_logging, get_logger


def mask_secret(value: str, default: str) -> str:
    """Render a secret for display without revealing it."""
    if not value:
        return "(not set)"
    if value == default:
        return "(default, change before deploying)"
    return f"{value[:2]}{'*' * 8} ({len(value)} chars)"


@click.group()
@click.version_option(version="0.1.0", prog_name="EventAuth")
def cli() -> None:
    """EventAuth - authentication service for the event recommendation API.

    Configuration is read from EVENTAUTH_* environment variables and .env.
    """


@cli.command()
@click.option(
    "--host",
    type=str,
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the EventAuth server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting EventAuth server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "eventauth.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Initialize the database.

    Creates the users table if it does not exist yet. Existing data is kept.
    """
    from eventauth.infrastructure.persistence.database import (
        DatabaseManager,
        close_database,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    if not force:
        click.confirm(
            f"This will create missing tables in {settings.database_url}. Continue?",
            abort=True,
            default=False,
        )

    async def initialize() -> None:
        db = DatabaseManager(settings)
        try:
            await init_database(db)
            click.echo("Database initialized successfully.")
        finally:
            await close_database(db)

    try:
        asyncio.run(initialize())
    except RuntimeError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@cli.command()
@click.option("--username", type=str, default=None, help="Login name (prompts if not provided)")
@click.option(
    "--password",
    type=str,
    default=None,
    help="Password (prompts if not provided)",
)
@click.option("--gender", type=str, required=True, help="Self-described gender")
@click.option("--age", type=click.IntRange(min=1), required=True, help="Age in years")
@click.option("--email", type=str, required=True, help="Contact email address")
@click.option("--phone", type=str, required=True, help="Contact phone number")
@click.option("--address", type=str, default=None, help="Postal address")
def create_user(
    username: str | None,
    password: str | None,
    gender: str,
    age: int,
    email: str,
    phone: str,
    address: str | None,
) -> None:
    """Register a user directly in the database.

    Goes through the same registration path as POST /auth/register, so the
    password is hashed with the configured salt.
    """
    from eventauth.domain.exceptions import BadRequestError
    from eventauth.domain.services import AuthService
    from eventauth.infrastructure.auth import JWTService, PasswordVerifier
    from eventauth.infrastructure.persistence.database import (
        DatabaseManager,
        close_database,
        init_database,
    )
    from eventauth.infrastructure.persistence.repositories import UserRepository

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    if username is None:
        username = click.prompt("Username", type=str)
    if password is None:
        password = click.prompt("Password", hide_input=True, confirmation_prompt=True)

    async def create() -> str:
        db = DatabaseManager(settings)
        try:
            await init_database(db)
            async with db.session() as session:
                service = AuthService(
                    store=UserRepository(session),
                    verifier=PasswordVerifier(salt=settings.password_salt),
                    jwt_service=JWTService(
                        secret_key=settings.token_secret,
                        algorithm=settings.token_algorithm,
                    ),
                    token_validity=settings.token_validity,
                )
                user = await service.register(
                    username=username,
                    password=password,
                    gender=gender,
                    age=age,
                    email=email,
                    phone=phone,
                    address=address,
                )
            return user.id
        finally:
            await close_database(db)

    try:
        user_id = asyncio.run(create())
    except BadRequestError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error("User creation failed", username=username, error=e.message)
        raise SystemExit(1)

    click.echo(f"\nUser created successfully!\n  User ID:  {user_id}\n  Username: {username}\n")
    logger.info("User created via CLI", user_id=user_id, username=username)


@cli.command()
def info() -> None:
    """Display EventAuth configuration (secrets masked)."""
    settings = get_settings()

    click.echo(f"""
EventAuth v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix or '/'}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Echo:         {settings.db_echo}

Security:
  Algorithm:    {settings.token_algorithm}
  Token Valid:  {settings.token_validity_days} days
  Token Secret: {mask_secret(settings.token_secret, DEFAULT_TOKEN_SECRET)}
  Password Salt: {mask_secret(settings.password_salt, DEFAULT_PASSWORD_SALT)}

CORS:
  Origins:      {', '.join(settings.cors_origins)}
  Headers:      {', '.join(settings.cors_allow_headers)}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `eventauth` console script and by `python -m eventauth`.
    """
    cli()


if __name__ == "__main__":
    main()
