"""Domain values, errors and input parsing for contacts."""
