from .errors import MatrixAPIError, MatrixError, MatrixPermanentError, MatrixTransientError
from .rest import MatrixRestClient, notice_content
from .transport import MatrixChatTransport, room_thread

__all__ = [
    "MatrixAPIError",
    "MatrixChatTransport",
    "MatrixError",
    "MatrixPermanentError",
    "MatrixRestClient",
    "MatrixTransientError",
    "notice_content",
    "room_thread",
]
