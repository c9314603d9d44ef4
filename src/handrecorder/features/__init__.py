"""Feature packages exposed over HTTP."""
