"""Pure domain services: consensus, duplicate detection, validation, links."""
