# post_arch/__main__.py
from post_arch.cli import main


if __name__ == "__main__":
    main()
