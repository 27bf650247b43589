from renewal_engine.api.routes.deadlines import router as deadlines_router
from renewal_engine.api.routes.lifecycle import router as lifecycle_router
from renewal_engine.api.routes.renewals import router as renewals_router

__all__ = ["deadlines_router", "lifecycle_router", "renewals_router"]
