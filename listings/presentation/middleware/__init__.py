from listings.presentation.middleware.correlation import (CorrelationIDMiddleware,
                                                          get_correlation_id)
from listings.presentation.middleware.timeout import TimeoutMiddleware

__all__ = ["CorrelationIDMiddleware", "TimeoutMiddleware", "get_correlation_id"]
