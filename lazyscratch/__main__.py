"""Module entrypoint for ``python -m lazyscratch``.

All argument parsing and runtime setup happen in ``lazyscratch.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
