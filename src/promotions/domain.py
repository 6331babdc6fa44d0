"""Promotions bounded context: promotion definitions, campaigns and the
discount computation engine.

Promotions and campaigns are standard CQRS aggregates. The engine in
``promotions.compute_actions`` is pure: it consumes promotion DTOs and a cart
context and returns the adjustment actions the pricing stage applies.
"""

from protean.domain import Domain

from promotions.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
promotions = Domain(name="promotions")
