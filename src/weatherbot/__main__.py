from weatherbot.cli import app

app()
