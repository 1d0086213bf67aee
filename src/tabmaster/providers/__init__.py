"""tabmaster.providers package: browser capability backends."""
