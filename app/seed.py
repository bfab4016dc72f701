"""
CLI entrypoint for provisioning permissions, roles and the bootstrap admin. Safe to re-run:

  python -m app.seed

Run it once after `alembic upgrade head`, before opening the panel.
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import session_scope
from app.services.seeding import seed_roles_and_permissions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run the seeder; exit status 0 on success, 1 if any write failed."""
    settings = get_settings()
    try:
        with session_scope() as db:
            seed_roles_and_permissions(db, settings)
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
