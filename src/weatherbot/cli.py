import logging
from typing import Optional

import typer
from rich.console import Console

from .errors import ConfigurationError
from .settings import settings
from .weather_secrets import weather_secrets as secrets

### Keep module level imports light: every command pays for them.
# The weather tools and litellm are imported inside the commands that use them.

app = typer.Typer(help="QWeather lookups and a web-search chatbot")
weather_app = typer.Typer(name="weather", help="Look up Chinese city weather")
secrets_app = typer.Typer(name="secrets", help="Manage secrets")
settings_app = typer.Typer(name="settings", help="Manage settings")

app.add_typer(weather_app)
app.add_typer(secrets_app)
app.add_typer(settings_app)

console = Console()


def configure_logging(debug: bool):
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.callback()
def main(
    debug: bool = typer.Option(
        False, "--debug", help="Log requests and tool calls", envvar="WEATHERBOT_DEBUG"
    )
):
    """
    weatherbot: QWeather tools and a command-line chatbot
    """
    configure_logging(debug)


def _weather_tool():
    from .tools.weather_tool import QWeatherTool

    try:
        return QWeatherTool()
    except ConfigurationError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(1)


@weather_app.command("now")
def weather_now(city: str = typer.Argument(..., help="城市名称，如：北京")):
    """Show current weather for a city"""
    typer.echo(_weather_tool().current(city).render())


@weather_app.command("alerts")
def weather_alerts(city: str = typer.Argument(..., help="城市名称，如：北京")):
    """Show active weather alerts for a city"""
    typer.echo(_weather_tool().alerts(city).render())


@app.command()
def chat(
    model: Optional[str] = typer.Option(
        None, "--model", help="litellm model id, defaults to the DEFAULT_CHAT_MODEL setting"
    ),
):
    """Chat with an assistant that can search the web and look up weather"""
    from .chat import start_chat

    try:
        start_chat(model=model)
    except ConfigurationError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(1)


# Secrets commands
@secrets_app.command("set")
def secrets_set(
    name: str,
    value: Optional[str] = typer.Argument(None, help="Prompted for when omitted"),
):
    """Set a secret, as NAME VALUE or NAME=VALUE"""
    if "=" in name and value is None:
        name, value = name.split("=", 1)
    if value is None:
        value = typer.prompt(f"Value for {name}", hide_input=True)
    secrets.set_secret(name, value)
    typer.echo(f"Secret {name} set")


@secrets_app.command("list")
def secrets_list(
    values: bool = typer.Option(False, "--values", help="Show secret values")
):
    """List all secrets"""
    if values:
        for name, value in secrets.get_all_secrets():
            typer.echo(f"{name}={value}")
    else:
        typer.echo("\n".join(sorted(secrets.list_secrets())))


@secrets_app.command("get")
def secrets_get(name: str):
    """Get a secret"""
    typer.echo(secrets.get_secret(name))


@secrets_app.command("delete")
def secrets_delete(name: str):
    """Delete a secret"""
    secrets.delete_secret(name)
    typer.echo(f"Secret {name} deleted")


# Settings commands
@settings_app.command("set")
def settings_set(name: str, value: str):
    """Set a setting value"""
    settings.set(name, value)
    typer.echo(f"Setting {name} set")


@settings_app.command("list")
def settings_list():
    """List all settings"""
    typer.echo("\n".join(sorted(settings.list_settings())))


@settings_app.command("get")
def settings_get(name: str):
    """Get a setting"""
    typer.echo(settings.get(name))


@settings_app.command("delete")
def settings_delete(name: str):
    """Delete a setting"""
    settings.delete_setting(name)
    typer.echo(f"Setting {name} deleted")


if __name__ == "__main__":
    app()
