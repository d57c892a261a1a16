# create_user.py
import asyncio
from getpass import getpass

from content_api.core.config import DATABASE_NAME, setup_logging
from content_api.dao.user import UserDao
from content_api.db.database import close_db, ping
from content_api.models.user import User
from content_api.services.v1.user import UserService
from pydantic import ValidationError


async def create_initial_user():
    """Seed an account so the first client can log in."""
    print("--- Create User Account ---")

    if not await ping():
        print(f"Error: cannot reach MongoDB (database: {DATABASE_NAME}). Check MONGODB_URL.")
        return
    print(f"Connected to database: {DATABASE_NAME}")

    user_dao = UserDao()
    await user_dao.ensure_indexes()

    while True:
        phone = input("Enter phone number: ").strip()
        if phone:
            break
        print("Phone cannot be empty.")

    while True:
        password = getpass("Enter password: ")
        if password and password == getpass("Confirm password: "):
            break
        print("Passwords are empty or do not match. Please try again.")

    nickname = input("Enter nickname (optional, press Enter to skip): ").strip() or None

    try:
        user_in = User.Create(phone=phone, password=password, nickname=nickname)
    except ValidationError as e:
        print(f"Invalid input: {e}")
        return

    result = await UserService(user_dao).register(user_in)
    if result.succeeded:
        print(f"User '{phone}' created with id {result.data['id']}.")
    else:
        print(f"Error creating user: {result.msg}")


async def main():
    try:
        await create_initial_user()
    finally:
        close_db()
        print("Database connection closed.")


if __name__ == "__main__":
    setup_logging()
    asyncio.run(main())
