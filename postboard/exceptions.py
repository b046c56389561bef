class PostboardError(Exception):
    """Base class for errors raised by postboard."""


class NotFoundError(PostboardError):
    """No document with the requested id exists in the model's collection."""

    def __init__(self, model: str, doc_id: str):
        self.model = model
        self.doc_id = doc_id
        super().__init__(f"{model} with id {doc_id!r} not found")
