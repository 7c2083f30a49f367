"""
Grant or revoke a role (e.g. bootstrap the principal). Run from project root:
  python -m purgehub.scripts.grant_role USER_ID [role] [--revoke]
Example:
  python -m purgehub.scripts.grant_role 7b0c0f7e-7d8a-4a53-9a57-2b6e1f9d4c11 super_admin
"""
import argparse
import sys
from uuid import UUID

from purgehub.core.database import session_scope
from purgehub.models.role import ROLE_ADMIN, ROLE_VALUES
from purgehub.services.roles import grant_role, revoke_role


def main() -> int:
    parser = argparse.ArgumentParser(description="Grant or revoke a Purge Hub role (no console needed).")
    parser.add_argument("user_id", help="Account UUID")
    parser.add_argument("role", nargs="?", default=ROLE_ADMIN, choices=sorted(ROLE_VALUES))
    parser.add_argument("--revoke", action="store_true", help="Remove the role instead of granting it")
    args = parser.parse_args()

    try:
        user_id = UUID(args.user_id.strip())
    except ValueError:
        print("user_id must be a UUID.", file=sys.stderr)
        return 1

    with session_scope() as db:
        if args.revoke:
            if revoke_role(db, user_id, args.role):
                print(f"Revoked role '{args.role}' from {user_id}.")
            else:
                print(f"{user_id} did not hold role '{args.role}'.")
            return 0
        if grant_role(db, user_id, args.role):
            print(f"Granted role '{args.role}' to {user_id}.")
        else:
            print(f"{user_id} already holds role '{args.role}'.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
