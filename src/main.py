"""Main entry point for the task list."""
from cli import cli
from config import load_settings
from logging_setup import setup_logging


def main():
    settings = load_settings()
    setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    cli(obj=settings)

if __name__ == "__main__":
    main()
