"""Module entrypoint for ``python -m harpoon``.

All argument parsing and session setup happen in ``harpoon.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
