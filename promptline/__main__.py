"""Allow ``python -m promptline``."""

from promptline.main import main

if __name__ == "__main__":
    main()
