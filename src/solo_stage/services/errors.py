"""Domain errors raised by the service layer."""


class PostNotFoundError(LookupError):
    """Raised when an operation targets a post that does not exist."""

    def __init__(self, post_id: str) -> None:
        super().__init__(f"Post {post_id} not found")
        self.post_id = post_id
