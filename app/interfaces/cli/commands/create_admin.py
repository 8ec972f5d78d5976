"""
Create an admin account
"""

import getpass

from app.core.enums import UserRole
from app.core.exceptions import AppException
from app.infrastructure.db.connection import database_manager
from app.services.auth_service import AuthService

from .base import BaseCommand


class Command(BaseCommand):
    name = "create-admin"
    description = "Create an admin account that can call the /admin endpoints"

    def add_arguments(self, parser):
        parser.add_argument("--username", required=True, help="Login name")
        parser.add_argument("--email", required=True, help="Contact email")
        parser.add_argument("--password", help="Password (prompted when omitted)")
        parser.add_argument("--full-name", dest="full_name", help="Display name")

    def handle(self, **kwargs) -> int:
        password = kwargs.get("password") or getpass.getpass("Password: ")

        database_manager.create_tables()
        try:
            with database_manager.get_session() as session:
                user = AuthService(session).create_user(
                    username=kwargs["username"],
                    email=kwargs["email"],
                    password=password,
                    role=UserRole.ADMIN,
                    full_name=kwargs.get("full_name"),
                )
        except AppException as e:
            self.print_error(e.message)
            return 1

        self.print_success(f"Admin '{user.username}' created (id {user.id})")
        return 0
