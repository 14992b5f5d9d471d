"""Pages hosted by MainWindow's QStackedWidget."""
