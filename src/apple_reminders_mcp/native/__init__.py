"""Native store gateway, run as a separate process against EventKit."""
