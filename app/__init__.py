"""UMS EMaS event management API."""
