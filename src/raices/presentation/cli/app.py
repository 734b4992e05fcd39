"""RaícesMX CLI application using Typer.

Command-line utilities for the backend: secret generation for deployment
configuration and database maintenance.
"""

import asyncio
import secrets
from pathlib import Path

import typer
from rich.console import Console
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from raices_config.settings import get_settings
from raices_identity.domain.shared.time import utc_now
from raices_identity.infrastructure.persistence.sqlalchemy import (
    Base,
    PasswordResetCodeRepositorySQLAlchemy,
)

app = typer.Typer(
    name="raices",
    help="RaícesMX backend CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

db_app = typer.Typer(
    name="db",
    help="Database maintenance",
    no_args_is_help=True,
)
app.add_typer(db_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for RaícesMX configuration.

    Generates:
    - JWT_SECRET_KEY: Secret for signing session tokens
    - SESSION_SECRET_KEY: Secret for the OAuth state cookie

    Copy the output to your .env file.
    """
    console.print("\n[bold green]RaícesMX Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print("\nGenerated secrets for your [bold].env[/bold] configuration file:\n")

    # 64 bytes of entropy for HS256
    # soft_wrap keeps each secret on one line for copy-paste
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={secrets.token_urlsafe(64)}", soft_wrap=True)
    console.print(f"[cyan]SESSION_SECRET_KEY[/cyan]={secrets.token_urlsafe(32)}", soft_wrap=True)

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env (Docker) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


async def _init_db(database_url: str) -> None:
    if database_url.startswith("sqlite") and ":memory:" not in database_url:
        Path(database_url.split("///")[-1]).parent.mkdir(parents=True, exist_ok=True)
    engine = create_async_engine(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


async def _cleanup_codes(database_url: str) -> int:
    engine = create_async_engine(database_url)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_maker() as session:
            deleted = await PasswordResetCodeRepositorySQLAlchemy(session).delete_expired(utc_now())
            await session.commit()
    finally:
        await engine.dispose()
    return deleted


@db_app.command("init")
def init_db() -> None:
    """Create missing database tables."""
    settings = get_settings()
    asyncio.run(_init_db(settings.database_url))
    console.print("[green]Database schema is up to date[/green]")


@db_app.command("cleanup-codes")
def cleanup_codes() -> None:
    """Delete expired password reset codes."""
    settings = get_settings()
    deleted = asyncio.run(_cleanup_codes(settings.database_url))
    console.print(f"[green]Deleted {deleted} expired reset code(s)[/green]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
