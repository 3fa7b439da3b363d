from pagescript.apps.cli.app import app

app()
