"""REST API for OtakuTrack."""
