"""
Script to create the primary and log store schemas and seed roles/permissions
Run this script once against a fresh database
"""

import sys
from sqlalchemy.exc import SQLAlchemyError
from home_market.config import get_settings
from home_market.database import create_db_engine, create_session_factory, create_tables
from home_market.enums.user import UserRole
from home_market.models.user import Permission, Role

# Permission codes granted to each role
ROLE_PERMISSIONS = {
    UserRole.BUYER: ["order:create", "order:track"],
    UserRole.SELLER: ["offer:inbox", "offer:decide", "order:update", "order:ship", "item:publish"],
    UserRole.GIVER: ["offer:create", "offer:list"],
    UserRole.ADMIN: ["order:update", "order:ship", "order:track", "item:moderate"],
}


def seed_roles(db) -> None:
    """Insert missing roles and permissions; existing rows are left untouched."""
    permissions = {p.code: p for p in db.query(Permission).all()}
    for codes in ROLE_PERMISSIONS.values():
        for code in codes:
            if code not in permissions:
                permissions[code] = Permission(code=code, created_by="migration")
                db.add(permissions[code])

    for role_name, codes in ROLE_PERMISSIONS.items():
        role = db.query(Role).filter(Role.name == role_name).first()
        if role is None:
            role = Role(name=role_name, created_by="migration")
            db.add(role)
        for code in codes:
            if permissions[code] not in role.permissions:
                role.permissions.append(permissions[code])
    db.commit()


def run_migration():
    """Create all tables and seed the role catalogue"""
    settings = get_settings()

    print("Running migration: creating primary and log store tables...")

    try:
        engine = create_db_engine(settings.database_url, settings)
        log_engine = create_db_engine(settings.log_database_url, settings)
        create_tables(engine, log_engine)
        print("✓ Tables created")

        db = create_session_factory(engine)()
        try:
            seed_roles(db)
        finally:
            db.close()
        print("✓ Roles and permissions seeded")
        print("\nMigration completed successfully!")

    except SQLAlchemyError as e:
        print(f"✗ Error running migration: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run_migration()
