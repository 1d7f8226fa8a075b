"""
Command line entry points for IdeaRoulette.
"""

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from idearoulette.errors import IdeaRouletteError
from idearoulette.factory import create_ai_service, create_feed, create_services
from idearoulette.feed import FeedManager
from idearoulette.models.analytics import ClientInfo
from idearoulette.models.idea import Idea
from idearoulette.services.analytics_service import SessionLifecycle
from idearoulette.services.auth_service import AuthService, User
from idearoulette.services.fallback_ideas import get_fallback_ideas
from idearoulette.services.preference_service import PERSONALITY_PROFILES, format_personality
from idearoulette.services.user_data_service import UserDataService
from idearoulette.utils.config import config
from idearoulette.utils.constants import MIN_ONBOARDING_INTERESTS, PERSONALITY_UNLOCK_SWIPES
from idearoulette.utils.logger import configure_logging, logger
from idearoulette.utils.mongodb_client import MongoDBClient

app = typer.Typer(help="Swipe through AI-generated startup ideas.")
console = Console()

FEED_HELP = "[dim]n/enter next · p previous · l like · r remix · s share · e expand · q quit[/dim]"


def _render_idea(idea: Idea, liked: bool, position: str) -> Panel:
    heart = "❤️ " if liked else ""
    body = f"[italic]{idea.tagline}[/italic]\n\n[bold]{idea.category}[/bold] · ⭐ {idea.rating}"
    if idea.tags:
        body += "\n" + " ".join(f"#{tag}" for tag in idea.tags)
    if idea.remixes:
        body += "\n\n[bold]Remixes:[/bold] " + ", ".join(idea.remixes)
    return Panel(body, title=f"{heart}[bold]{idea.name}[/bold]", subtitle=position)


def _user_data(mongodb_client: MongoDBClient, user_id: str, name: str = "") -> UserDataService:
    auth_service = AuthService()
    user_data = UserDataService(mongodb_client, auth_service)
    user = User(uid=user_id, display_name=name)
    auth_service.sign_in(user)
    user_data.initialize_user(user)
    return user_data


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs")):
    if verbose:
        configure_logging("DEBUG")


@app.command()
def generate(
    count: int = typer.Option(10, "--count", "-c", help="Number of ideas to generate"),
    provider: Optional[str] = typer.Option(None, "--provider", help="gemini or openai"),
):
    """Generate a batch of ideas without touching the store."""
    ai_service = create_ai_service(provider or config.ai_provider)
    try:
        ideas = ai_service.generate_ideas(count=count)
    except IdeaRouletteError as e:
        logger.error(f"Generation failed: {e}")
        console.print("[bold red]Generation failed, showing built-in ideas instead.[/bold red]")
        ideas = get_fallback_ideas(count)

    table = Table(title="Startup ideas")
    table.add_column("Name", style="bold")
    table.add_column("Tagline")
    table.add_column("Category")
    table.add_column("Rating", justify="right")
    for idea in ideas:
        table.add_row(idea.name, idea.tagline, idea.category, f"{idea.rating:.1f}")
    console.print(table)


async def _run_feed(feed: FeedManager):
    console.print(FEED_HELP)
    while True:
        idea = feed.current
        if idea is None:
            console.print("[yellow]No ideas to show.[/yellow]")
            break

        for notice in feed.notices.pop_all():
            style = {"destructive": "red", "success": "green"}.get(notice.variant, "cyan")
            console.print(f"[{style}]{notice.title}[/{style}] {escape(notice.description)}")

        loading = " · loading more…" if feed.is_loading else ""
        console.print(_render_idea(idea, feed.is_liked(idea.name), f"{feed.cursor + 1}/{len(feed.ideas)}{loading}"))

        choice = (await asyncio.to_thread(console.input, "> ")).strip().lower()
        if choice in ("", "n"):
            if not feed.advance():
                console.print("[dim]You're at the end, more ideas are on the way.[/dim]")
                await feed.drain()
        elif choice == "p":
            feed.retreat()
        elif choice == "l":
            await feed.like_current()
        elif choice == "r":
            await feed.remix_current()
        elif choice == "s":
            console.print(escape(feed.share_current()))
        elif choice == "e":
            expanded = feed.expand_current()
            console.print(Panel(expanded.description or expanded.tagline, title=expanded.name))
        elif choice == "q":
            break
        else:
            console.print(FEED_HELP)

    await feed.drain()


@app.command()
def feed(
    user_id: str = typer.Option(..., "--user-id", "-u", help="User id to sign in as"),
    name: str = typer.Option("", "--name", "-n", help="Display name"),
    provider: Optional[str] = typer.Option(None, "--provider", help="gemini or openai"),
):
    """Browse the interactive idea feed."""
    with MongoDBClient() as mongodb_client:
        auth_service = AuthService()
        services = create_services(mongodb_client, auth_service, provider)
        lifecycle = SessionLifecycle(
            auth_service,
            services.user_data_service,
            services.recorder,
            ClientInfo(userAgent="idearoulette-cli"),
        )
        auth_service.sign_in(User(uid=user_id, display_name=name))

        async def session():
            idea_feed = await create_feed(services, lifecycle.context)
            await _run_feed(idea_feed)

        try:
            asyncio.run(session())
        except KeyboardInterrupt:
            thread = lifecycle.unload()
            if thread:
                thread.join(timeout=2)
            raise typer.Exit(code=130)
        auth_service.sign_out()


@app.command()
def onboard(
    user_id: str = typer.Option(..., "--user-id", "-u"),
    name: str = typer.Option(..., "--name", "-n", help="Name to greet the user with"),
    interests: List[str] = typer.Option([], "--interest", "-i", help="Category of interest, repeatable"),
):
    """Record a user's name and interests and mark onboarding as done."""
    options = config.category_options
    unknown = [interest for interest in interests if interest not in options]
    if unknown:
        console.print(f"[bold red]Unknown categories:[/bold red] {', '.join(unknown)}")
        console.print(f"Pick from: {', '.join(options)}")
        raise typer.Exit(code=1)
    if len(set(interests)) < MIN_ONBOARDING_INTERESTS:
        console.print(f"[bold red]Pick at least {MIN_ONBOARDING_INTERESTS} interests.[/bold red]")
        raise typer.Exit(code=1)

    with MongoDBClient() as mongodb_client:
        user_data = _user_data(mongodb_client, user_id, name)
        user_data.set_user_name(name)
        user_data.set_user_interests(interests)
        user_data.set_onboarding_completed(True)

    console.print(f"[bold green]Welcome, {name}![/bold green] Your feed will lean towards {', '.join(interests) or 'everything'}.")


@app.command()
def personality(user_id: str = typer.Option(..., "--user-id", "-u")):
    """Show a user's founder personality, once it has been unlocked."""
    with MongoDBClient() as mongodb_client:
        user_data = _user_data(mongodb_client, user_id)

        if not user_data.is_personality_unlocked():
            remaining = max(PERSONALITY_UNLOCK_SWIPES - user_data.get_swipe_count(), 0)
            console.print(f"Swipe {remaining} more ideas to unlock your founder personality.")
            return

        label = user_data.get_founder_personality()
        profile = PERSONALITY_PROFILES[label]
        preferences = user_data.get_user_preferences()
        body = f"{profile['description']}\n\n[bold]Traits:[/bold] {', '.join(profile['traits'])}"
        if preferences.likedCategories:
            body += f"\n[bold]Favorite categories:[/bold] {', '.join(preferences.likedCategories[:5])}"
        console.print(Panel(body, title=format_personality(label)))


@app.command()
def reset(
    user_id: str = typer.Option(..., "--user-id", "-u"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Clear all of a user's likes, preferences and progress."""
    if not yes:
        typer.confirm(f"Clear all data for {user_id}?", abort=True)

    with MongoDBClient() as mongodb_client:
        _user_data(mongodb_client, user_id).clear_all_user_data()

    console.print("[bold green]All user data cleared.[/bold green]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("idearoulette.api:app", host=host, port=port)


if __name__ == "__main__":
    app()
