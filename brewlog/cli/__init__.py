"""
cli — command-line interface for brewlog.

Entry points
────────────
  python -m brewlog   (via brewlog/__main__.py)
  brewlog             (via pyproject.toml [project.scripts])

Subcommands: list | show | add | edit | delete | export | gui
"""
