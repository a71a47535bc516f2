"""
Main entrypoint for the campground listing service.

Usage:
    Run the API directly (`python main.py`) or with uvicorn (`uvicorn src.api.app:app`).
"""
import os

import uvicorn

from src.db.database import create_tables


def main():
    """
    Main function to serve the API.
    """
    try:
        # Initialize database tables
        create_tables()

        host = os.getenv("HOST", "0.0.0.0")
        port = int(os.getenv("PORT", "8000"))
        print(f"Starting campground listing API on {host}:{port}...")
        uvicorn.run("src.api.app:app", host=host, port=port)
        return 0
    except Exception as e:
        print(f"An error occurred in the main function: {str(e)}")
        return 1


if __name__ == "__main__":
    exit_code = main()
    print(f"Exiting with code {exit_code}")
