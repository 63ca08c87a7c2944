import sys

from task_board.cli import main

if __name__ == "__main__":
    sys.exit(main())
