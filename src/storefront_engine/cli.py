"""Typer CLI for Storefront-Engine."""

import asyncio

import typer
from rich.console import Console

from storefront_engine.auth.roles import Role

app = typer.Typer(name="storefront", help="Storefront-Engine: multi-tenant storefront backend")
console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8080, help="Bind port"),
):
    """Start the Storefront-Engine API server."""
    import uvicorn
    from storefront_engine.app import create_app

    console.print(f"[bold green]Starting Storefront-Engine on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


async def _set_role(email: str, role: Role) -> bool:
    from storefront_engine.common.config import get_settings
    from storefront_engine.common.database import DatabaseManager
    from storefront_engine.identity.models import ProfileModel

    db = DatabaseManager(get_settings())
    await db.init()
    await db.create_all()
    try:
        async with db.admin_store() as store:
            profile = await store.get(ProfileModel, email=email)
            if profile is None:
                return False
            await store.update(profile, role=role.value)
            return True
    finally:
        await db.close()


@app.command()
def promote(
    email: str = typer.Argument(..., help="Email of an existing user"),
    role: Role = typer.Option(Role.SUPER_ADMIN, help="Role to assign"),
):
    """Assign a role to a user directly in the database (bootstrap the first admin)."""
    if asyncio.run(_set_role(email, role)):
        console.print(f"[bold green]{email}[/bold green] is now {role.value}")
    else:
        console.print(f"[bold red]No profile found for {email}[/bold red]")
        raise typer.Exit(1)


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check Storefront-Engine server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] — v{data['version']}")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
