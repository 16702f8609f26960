"""Allow ``python -m astgen``."""

from astgen.main import main

if __name__ == "__main__":
    raise SystemExit(main())
