import sys

from ridertriangle.cli import main

SESSION_PATH = "session.json"


def run(argv: list[str]) -> int:
    """
    Runs the comparison for a session file, session.json in the working
    directory when no arguments are given.
    """
    return main(argv or ["--session", SESSION_PATH])


if __name__ == '__main__':
    sys.exit(run(sys.argv[1:]))
