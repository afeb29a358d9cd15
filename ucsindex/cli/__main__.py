from ucsindex.cli.main import app

app(prog_name="ucsindex")
