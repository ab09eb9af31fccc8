class RemoteUnavailable(Exception):
    """The remote feed could not be queried (transport error or bad response)."""
