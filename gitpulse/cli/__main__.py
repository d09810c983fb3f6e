from gitpulse.cli.main import app

app(prog_name="gitpulse")
