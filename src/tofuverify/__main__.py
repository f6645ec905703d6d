"""Allow running as python -m tofuverify"""

from tofuverify.cli.main import main

if __name__ == "__main__":
    main()
