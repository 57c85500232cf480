"""Utility script to register a community membership with default preferences."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from townhall.domain.entities import NotificationPreferences
from townhall.infrastructure.database import SessionLocal, initialize_database
from townhall.infrastructure.repositories import MembershipRepository


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for membership creation."""

    parser = argparse.ArgumentParser(
        description="Add a user to a community so they receive its notifications.",
    )
    parser.add_argument("--user-id", required=True, help="Identifier of the user")
    parser.add_argument("--community-id", required=True, help="Identifier of the community")
    parser.add_argument(
        "--status",
        default="active",
        choices=["active", "suspended"],
        help="Membership status (default: active)",
    )
    parser.add_argument(
        "--mute",
        action="append",
        default=[],
        metavar="PREFERENCE",
        help="Preference flag to disable, e.g. --mute businesses (repeatable)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a membership using the provided command line arguments."""

    args = parse_args()
    preferences = NotificationPreferences()
    for flag in args.mute:
        if not hasattr(preferences, flag):
            raise SystemExit(f"Unknown preference flag: {flag}")
        setattr(preferences, flag, False)

    initialize_database()
    session = SessionLocal()
    try:
        repository = MembershipRepository(session)
        if repository.exists(args.user_id, args.community_id):
            raise SystemExit("The user already belongs to this community")
        repository.add(
            args.user_id,
            args.community_id,
            status=args.status,
            preferences=preferences,
        )
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not create the membership: {exc}") from exc
    finally:
        session.close()

    print(f"Membership created for user {args.user_id} in community {args.community_id}")


if __name__ == "__main__":
    main()
