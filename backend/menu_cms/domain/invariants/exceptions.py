class InvariantViolation(Exception):
    """A structural rule of the page store would be broken by the write."""
