"""
Demo data loader
Run from the project root: python run_seed.py
"""

import logging
import sys

from docket.seed import run_seed

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info("🚀 Seeding database...")
    try:
        run_seed()
        logger.info("✅ Seed complete")
    except Exception as e:
        logger.error(f"❌ Seed failed: {e}")
        sys.exit(1)
