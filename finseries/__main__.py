from finseries.cli import run

run()
