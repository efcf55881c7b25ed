#!/usr/bin/env python3
"""
User management CLI for Task Manager.
Run this script to add, inspect, or remove users.

Usage:
    python manage_users.py add <email> <password> <name>
    python manage_users.py list
    python manage_users.py delete <email>
    python manage_users.py passwd <email> <new_password>
    python manage_users.py rename <email> <new_name>
    python manage_users.py revoke <email>
"""

import sys

from task_manager.application.services.user_service import (
    check_name,
    check_password,
    normalize_email,
)
from task_manager.database import get_db, init_db
from task_manager.errors import ValidationError
from task_manager.infrastructure.repositories import (
    TaskRepository,
    TokenRepository,
    UserRepository,
)


def print_usage():
    print(__doc__)


def cmd_add(args):
    if len(args) < 3:
        print("Error: add requires <email> <password> <name>")
        print("Example: python manage_users.py add admin@example.com s3cret-pass \"Admin User\"")
        return 1

    repo = UserRepository(get_db())
    try:
        email = normalize_email(args[0])
        password = check_password(args[1])
        name = check_name(args[2])
    except ValidationError as e:
        print(f"Error: {e.detail}")
        return 1

    if repo.get_by_email(email):
        print(f"Error: User '{email}' already exists")
        return 1

    user_id = repo.create(name, email, password)
    print(f"User '{email}' created successfully (ID: {user_id})")
    return 0


def cmd_list(args):
    db = get_db()
    users = UserRepository(db).list_all()
    if not users:
        print("No users found. Create one with: python manage_users.py add <email> <password> <name>")
        return 0

    tokens = TokenRepository(db)
    tasks = TaskRepository(db)
    print(f"{'ID':<34} {'Email':<30} {'Name':<24} {'Sessions':>8} {'Tasks':>6}")
    print("-" * 106)
    for user in users:
        print(
            f"{user['id']:<34} {user['email']:<30} {user['name']:<24} "
            f"{tokens.count_for_user(user['id']):>8} {tasks.count_for_owner(user['id']):>6}"
        )
    return 0


def cmd_delete(args):
    if len(args) < 1:
        print("Error: delete requires <email>")
        return 1

    email = args[0]
    repo = UserRepository(get_db())
    user = repo.get_by_email(email)

    if not user:
        print(f"Error: User '{email}' not found")
        return 1

    # Confirm deletion
    confirm = input(f"Delete user '{email}' ({user['name']}) and all their tasks? [y/N]: ")
    if confirm.lower() != 'y':
        print("Cancelled")
        return 0

    repo.delete(user['id'])
    print(f"User '{email}' deleted")
    return 0


def cmd_passwd(args):
    if len(args) < 2:
        print("Error: passwd requires <email> <new_password>")
        return 1

    email = args[0]
    try:
        new_password = check_password(args[1])
    except ValidationError as e:
        print(f"Error: {e.detail}")
        return 1

    repo = UserRepository(get_db())
    user = repo.get_by_email(email)
    if not user:
        print(f"Error: User '{email}' not found")
        return 1

    repo.update_password(user['id'], new_password)
    print(f"Password updated for '{email}'")
    return 0


def cmd_rename(args):
    if len(args) < 2:
        print("Error: rename requires <email> <new_name>")
        return 1

    email = args[0]
    try:
        new_name = check_name(args[1])
    except ValidationError as e:
        print(f"Error: {e.detail}")
        return 1

    repo = UserRepository(get_db())
    user = repo.get_by_email(email)
    if not user:
        print(f"Error: User '{email}' not found")
        return 1

    repo.update(user['id'], name=new_name)
    print(f"Name for '{email}' changed to '{new_name}'")
    return 0


def cmd_revoke(args):
    if len(args) < 1:
        print("Error: revoke requires <email>")
        return 1

    email = args[0]
    db = get_db()
    user = UserRepository(db).get_by_email(email)
    if not user:
        print(f"Error: User '{email}' not found")
        return 1

    count = TokenRepository(db).delete_all_for_user(user['id'])
    print(f"Revoked {count} session(s) for '{email}'")
    return 0


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 1:
        print_usage()
        return 1

    # Initialize database
    init_db()

    command = argv[0].lower()
    args = argv[1:]

    commands = {
        'add': cmd_add,
        'list': cmd_list,
        'delete': cmd_delete,
        'passwd': cmd_passwd,
        'rename': cmd_rename,
        'revoke': cmd_revoke,
        'help': lambda _: (print_usage(), 0)[1],
    }

    if command not in commands:
        print(f"Unknown command: {command}")
        print_usage()
        return 1

    return commands[command](args)


if __name__ == "__main__":
    sys.exit(main())
