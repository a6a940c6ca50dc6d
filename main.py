import sys

from review_sentiment.cli import main

if __name__ == "__main__":
    sys.exit(main())
