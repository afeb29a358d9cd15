"""HTTP API routers."""

from ucsindex.web.routes.asset_routes import router as asset_router
from ucsindex.web.routes.audit_routes import router as audit_router
from ucsindex.web.routes.calculation_routes import router as calculation_router
from ucsindex.web.routes.health_routes import router as health_router

__all__ = ["asset_router", "audit_router", "calculation_router", "health_router"]
