"""MedStock bounded context: medication and supply inventory.

Covers the item catalog, the site/stock-area registry, the per-location
inventory ledger with its movement log, and the read-only analytics computed
from ledger snapshots. Every operation is scoped to a single tenant.
"""

from protean.domain import Domain

from medstock.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging(log_dir="logs", log_file_prefix="medstock")

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
medstock = Domain(name="medstock")
