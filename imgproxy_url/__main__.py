"""Allow `python -m imgproxy_url`."""

from .cli import main

if __name__ == '__main__':
    main()
