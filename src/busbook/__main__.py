"""Allow running as: python -m busbook"""
from busbook.main import cli_main

if __name__ == "__main__":
    cli_main()
