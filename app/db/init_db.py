
import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from sqlalchemy.orm import Session
from app.core.config import Settings, settings as default_settings
from app.models.booking import STATUS_IDS, STATUS_LABELS
from app.models.lookup import BookingStatusRow, Size, Placement, Style
import logging

logger = logging.getLogger(__name__)

DEFAULT_SIZES = ["Small", "Medium", "Large", "Extra Large"]
DEFAULT_PLACEMENTS = ["Arm", "Forearm", "Leg", "Back", "Chest", "Neck", "Hand", "Ankle", "Ribs"]
DEFAULT_STYLES = [
    "Traditional", "Neo-Traditional", "Realism", "Blackwork", "Fine Line",
    "Watercolor", "Japanese", "Geometric", "Tribal", "Minimalist",
]

def create_database(settings: Settings = default_settings):
    """Create database if it doesn't exist."""
    try:
        # Connect to default 'postgres' database to check/create target DB
        con = psycopg2.connect(
            user=settings.POSTGRES_USER,
            password=settings.POSTGRES_PASSWORD,
            host=settings.POSTGRES_SERVER,
            port=settings.POSTGRES_PORT,
            dbname="postgres"
        )
        con.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
        cur = con.cursor()

        # Check if DB exists
        cur.execute("SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s", (settings.POSTGRES_DB,))
        exists = cur.fetchone()

        if not exists:
            logger.info("Database %s does not exist. Creating...", settings.POSTGRES_DB)
            cur.execute(f'CREATE DATABASE "{settings.POSTGRES_DB}"')
            logger.info("Database %s created successfully.", settings.POSTGRES_DB)
        else:
            logger.info("Database %s already exists.", settings.POSTGRES_DB)

        cur.close()
        con.close()
    except psycopg2.Error as e:
        logger.error("Error creating database: %s", e)
        # Proceeding anyway, maybe it exists or connection params are for the target DB directly

def seed_lookups(db: Session) -> None:
    """Insert booking statuses, sizes, placements and styles that are missing."""
    for status, status_id in STATUS_IDS.items():
        row = db.get(BookingStatusRow, status_id)
        if row is None:
            db.add(BookingStatusRow(status_id=status_id, status=STATUS_LABELS[status]))
        elif row.status != STATUS_LABELS[status]:
            row.status = STATUS_LABELS[status]

    existing_sizes = {s for (s,) in db.query(Size.size).all()}
    for name in DEFAULT_SIZES:
        if name not in existing_sizes:
            db.add(Size(size=name))

    existing_placements = {p for (p,) in db.query(Placement.placement).all()}
    for name in DEFAULT_PLACEMENTS:
        if name not in existing_placements:
            db.add(Placement(placement=name))

    existing_styles = {s for (s,) in db.query(Style.style_name).all()}
    for name in DEFAULT_STYLES:
        if name not in existing_styles:
            db.add(Style(style_name=name))

    db.commit()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_database()
