from .error_handler import (
    BusinessException, ErrorHandlerMiddleware, register_exception_handlers, unwrap
)
from .request_context import RequestContextMiddleware
