from sleek.cli import run

run()
