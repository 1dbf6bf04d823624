"""QBS CLI application using Typer.

Command-line utilities for the QB Securiegnty backend: secret generation
for deployment configuration, running the API server and creating the
database schema.
"""

import asyncio
import secrets

import typer
import uvicorn
from rich.console import Console

from qbs.infrastructure.persistence.sqlalchemy import Base, create_database_engine
from qbs_config.settings import get_settings

# Registers the users table on Base.metadata
from qbs_identity.infrastructure.persistence.sqlalchemy import UserModel  # noqa: F401

app = typer.Typer(
    name="qbs",
    help="QB Securiegnty auth backend CLI",
    no_args_is_help=True,
)
console = Console()


# Create secrets subcommand group
secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

db_app = typer.Typer(
    name="db",
    help="Database utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for QBS configuration.

    Generates the required secrets:
    - JWT_SECRET_KEY: Secret for signing JWT authentication tokens
    - POSTGRES_PASSWORD: Database password

    Copy the output to your .env file.
    """
    console.print("\n[bold green]QBS Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # 64 random bytes for HS256 signing
    jwt_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={jwt_secret}")

    db_password = secrets.token_urlsafe(32)
    console.print(f"[cyan]POSTGRES_PASSWORD[/cyan]={db_password}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env (Docker) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    settings = get_settings()
    bind_host = host or settings.api_host
    bind_port = port or settings.api_port
    console.print(
        f"[bold green]Starting {settings.app_name} API[/bold green] "
        f"on {bind_host}:{bind_port}"
    )
    uvicorn.run(
        "qbs.presentation.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@db_app.command("init")
def init_db() -> None:
    """Create all database tables that do not exist yet."""
    settings = get_settings()

    async def _create() -> None:
        engine = create_database_engine(settings)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        finally:
            await engine.dispose()

    asyncio.run(_create())
    console.print("[green]Database schema created.[/green]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
