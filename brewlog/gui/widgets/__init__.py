from brewlog.gui.widgets.star_rating import StarRating

__all__ = ["StarRating"]
