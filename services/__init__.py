"""
services - Business-logic layer sitting between API and DB.
"""

from services.projects_service import ProjectsService              # noqa: F401
from services.parts_service import PartsService                    # noqa: F401
from services.orders_service import OrdersService, OrderItemsService  # noqa: F401
from services.auth_service import UsersService                     # noqa: F401
from services.sequence_service import next_part_number             # noqa: F401
from services.order_matcher import match_order                     # noqa: F401
from services.order_stats import project_stats                     # noqa: F401
