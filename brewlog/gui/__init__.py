"""
gui — PyQt6 front-end for the brew log.

Public API
──────────
main_window           — MainWindow, the top-level application window
viewmodels            — pure-Python observable state containers
pages                 — home list, brew detail and the brew form wizard
widgets               — small reusable widgets (StarRating)

MainWindow is not imported here so that the view models stay importable
without a Qt platform plugin.
"""
