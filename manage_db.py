#!/usr/bin/env python3
"""
Database management script for the timesheet service.
Handles table creation, teardown, and demo data seeding.
"""

import sys
import asyncio
from decimal import Decimal
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from timesheet_api.domain.models.user import UserRole
from timesheet_api.infrastructure.auth.jwt_handler import JWTHandler
from timesheet_api.infrastructure.db.database import SessionLocal, create_tables, drop_tables, engine
from timesheet_api.infrastructure.db.models import (
    UserModel, ClientModel, ProjectModel, TaskModel
)


MANAGER_ID = "00000000-0000-0000-0000-000000000001"
EMPLOYEE_ID = "00000000-0000-0000-0000-000000000002"
ADMIN_ID = "00000000-0000-0000-0000-000000000003"


async def init_database():
    """Create all tables."""
    print("Creating tables...")
    await create_tables()
    print("Tables created.")


async def drop_database():
    """Drop all tables - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() != 'yes':
        print("Drop cancelled.")
        return False
    print("Dropping tables...")
    await drop_tables()
    return True


async def reset_database():
    """Drop and recreate all tables."""
    if await drop_database():
        await init_database()


async def seed_database():
    """Insert a manager, a report, an administrator and a billable project."""
    async with SessionLocal() as session:
        session.add_all([
            UserModel(id=ADMIN_ID, email="admin@example.com", first_name="Ada",
                      last_name="Admin", role=UserRole.SUPER_ADMIN),
            UserModel(id=MANAGER_ID, email="manager@example.com", first_name="Maria",
                      last_name="Manager", role=UserRole.MANAGER, position="Team Lead"),
        ])
        await session.flush()

        session.add(UserModel(id=EMPLOYEE_ID, email="employee@example.com", first_name="Emil",
                              last_name="Employee", role=UserRole.EMPLOYEE,
                              manager_id=MANAGER_ID, position="Developer"))

        client = ClientModel(name="Acme Corp")
        session.add(client)
        await session.flush()

        project = ProjectModel(name="Website Relaunch", code="WEB", client_id=client.id)
        session.add(project)
        await session.flush()

        session.add_all([
            TaskModel(project_id=project.id, name="Development", is_billable=True,
                      hourly_rate=Decimal("95.00")),
            TaskModel(project_id=project.id, name="Internal meetings", is_billable=False),
        ])
        await session.commit()

    print(f"Seeded users, client and project {project.id}.")
    print_tokens()


def print_tokens():
    """Print bearer tokens for the seeded users."""
    handler = JWTHandler()
    for user_id, role in ((EMPLOYEE_ID, UserRole.EMPLOYEE),
                          (MANAGER_ID, UserRole.MANAGER),
                          (ADMIN_ID, UserRole.SUPER_ADMIN)):
        print(f"{role.value:<12} {handler.generate_token(user_id, role, expires_minutes=24 * 60)}")


async def run(command_name: str):
    try:
        if command_name == "init":
            await init_database()
        elif command_name == "drop":
            await drop_database()
        elif command_name == "reset":
            await reset_database()
        elif command_name == "seed":
            await seed_database()
        elif command_name == "tokens":
            print_tokens()
        else:
            print(f"Unknown command: {command_name}")
    finally:
        await engine.dispose()


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  init           - Create all tables")
        print("  drop           - Drop all tables (WARNING: drops all data)")
        print("  reset          - Drop and recreate all tables")
        print("  seed           - Insert demo users and a project")
        print("  tokens         - Print bearer tokens for the demo users")
        return

    asyncio.run(run(sys.argv[1]))


if __name__ == "__main__":
    main()
