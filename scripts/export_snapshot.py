#  to run the script, run the following command:
#  python scripts/export_snapshot.py [output_path]

"""
Snapshot Export Script
Builds a store holding the demo clinic data and writes it as a snapshot file.
Point SNAPSHOT_PATH at the result to start the service from it.
"""
import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.clinical_store.seed import seed_demo_data
from app.clinical_store.store import ClinicalStore
from app.database.connection import create_db_engine
from config.appconfig import settings

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def export_demo_snapshot(output_path: Path) -> Path:
    """Seed a fresh in-memory store and write its snapshot to `output_path`."""
    store = ClinicalStore(create_db_engine("sqlite://"))
    seed_demo_data(store)
    path = store.save_snapshot(output_path)
    logger.info(f"✓ Exported {store.counts()}")
    return path


if __name__ == "__main__":
    default_path = settings.resolved_snapshot_path or Path("data/clinic_snapshot.json")
    target = Path(sys.argv[1]) if len(sys.argv) > 1 else default_path
    print("=======================================================================\n")
    export_demo_snapshot(target)
    print("=======================================================================\n")
