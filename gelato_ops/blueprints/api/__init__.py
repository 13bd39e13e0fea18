from flask import Blueprint

api_bp = Blueprint('api', __name__, url_prefix='/api')

# Import all route modules to register them
from . import health  # noqa: E402,F401
from . import delivery_routes  # noqa: E402,F401
from . import production_routes  # noqa: E402,F401
from . import stocktake_routes  # noqa: E402,F401
from . import audit_routes  # noqa: E402,F401
from . import catalog_routes  # noqa: E402,F401
