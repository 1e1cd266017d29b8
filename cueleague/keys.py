"""
Mint single-use organizer access keys from the command line.

Usage:
    python -m cueleague.keys
    python -m cueleague.keys --count 5
"""
import argparse
import sys

from cueleague.core.database import SessionLocal, check_connection, init_db
from cueleague.core.exceptions import LeagueError
from cueleague.services import auth_service


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate organizer access keys")
    parser.add_argument("--count", type=int, default=None, help="Number of keys (default: ACCESS_KEY_BATCH_SIZE)")
    args = parser.parse_args(argv)

    if args.count is not None and args.count < 1:
        print("Error: --count must be at least 1", file=sys.stderr)
        return 2

    try:
        check_connection()
        init_db()
        db = SessionLocal()
        try:
            keys = auth_service.generate_keys(db, count=args.count)
        finally:
            db.close()
    except LeagueError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(f"{len(keys)} access keys generated:")
    for key in keys:
        print(f"  {key}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
