"""Permite `python -m cli` sin instalar el script `taskdesk`."""

from cli.main import run

run()
