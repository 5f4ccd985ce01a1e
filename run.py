#  Bankr App Kit - Entry Point
#
#  Runs the create-bankr-app CLI from a source checkout.
#
#  Depends on: bankr_app/cli.py
#  Used by:    (run directly)

import sys


def main():
    try:
        from bankr_app.cli import main as cli_main
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(cli_main())


if __name__ == "__main__":
    main()
