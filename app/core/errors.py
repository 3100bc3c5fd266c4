class LinkStoreError(Exception):
    """Store unreachable, or a stored record could not be read back."""


class DataIntegrityError(Exception):
    """A token resolved to more than one secure link."""

    def __init__(self, token_matches: int):
        super().__init__(f"token matched {token_matches} secure links")
        self.token_matches = token_matches
