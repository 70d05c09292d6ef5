"""Database seeding service for demo data."""
from typing import List

from flask import current_app

from attendance_tracker.models.user import User, UserRole
from attendance_tracker.services.user_service import UserService

DEMO_STUDENTS = [
    ('student1', 'Alice Johnson', 'alice@example.com'),
    ('student2', 'Bilal Ahmed', 'bilal@example.com'),
    ('student3', 'Chen Wei', 'chen@example.com'),
    ('student4', 'Dana Kovacs', 'dana@example.com'),
    ('student5', 'Emeka Obi', 'emeka@example.com'),
]


class SeedService:
    """Service to seed database with demo data."""

    @staticmethod
    def seed_all(password: str = 'student123') -> List[User]:
        SeedService.ensure_admin()
        return SeedService.seed_students(password)

    @staticmethod
    def ensure_admin() -> User:
        """Create the configured default admin if missing."""
        username = current_app.config['DEFAULT_ADMIN_USERNAME']
        admin = UserService.get_by_username(username)
        if admin:
            return admin

        return UserService.create_user(
            username=username,
            password=current_app.config['DEFAULT_ADMIN_PASSWORD'],
            name='Administrator',
            email=f'{username}@example.com',
            role=UserRole.ADMIN.value
        )

    @staticmethod
    def seed_students(password: str) -> List[User]:
        created = []
        for username, name, email in DEMO_STUDENTS:
            if UserService.get_by_username(username):
                continue
            created.append(UserService.create_user(
                username=username,
                password=password,
                name=name,
                email=email
            ))
        return created
