"""
brewlog — a personal coffee-brewing logbook.

Packages
────────
store    — durable record store + newest-first view cache
form     — four-step brew form wizard with step-scoped validation
display  — formatting helpers shared by the CLI and the GUI
gui      — PyQt6 desktop front-end
cli      — argparse command line
"""

__version__ = "0.1.0"
