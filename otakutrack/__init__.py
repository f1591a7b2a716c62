"""OtakuTrack: anime watch tracking, clubs, reviews and episode reminders."""

__version__ = "0.1.0"
