#!/usr/bin/env python3
"""
Setup validation script for Invoice Desk.

Checks all system requirements and provides guidance for missing components.
"""

import os
import sys
from pathlib import Path


def print_header(text: str):
    """Print a formatted header."""
    print(f"\n{'=' * 60}")
    print(f"  {text}")
    print('=' * 60)


def print_check(name: str, status: bool, message: str = ""):
    """Print a check result."""
    icon = "✅" if status else "❌"
    print(f"{icon} {name}: {message}")


def print_warning(message: str):
    """Print a warning message."""
    print(f"⚠️  {message}")


def print_info(message: str):
    """Print an info message."""
    print(f"ℹ️  {message}")


def check_python_version():
    """Check Python version."""
    print_header("Python Version")

    version = sys.version_info
    required = (3, 10)

    is_ok = version >= required
    print_check(
        "Python",
        is_ok,
        f"{version.major}.{version.minor}.{version.micro} "
        f"({'OK' if is_ok else f'requires {required[0]}.{required[1]}+'})"
    )

    return is_ok


def check_python_packages():
    """Check required Python packages."""
    print_header("Python Packages")

    # Import name -> distribution name
    required_packages = {
        "streamlit": "streamlit",
        "requests": "requests",
        "pydantic": "pydantic",
        "openpyxl": "openpyxl",
        "pandas": "pandas",
        "PIL": "Pillow",
        "dotenv": "python-dotenv",
    }

    all_ok = True

    for import_name, display_name in required_packages.items():
        try:
            __import__(import_name)
            print_check(display_name, True, "Installed")
        except ImportError:
            print_check(display_name, False, "Not installed")
            all_ok = False

    if not all_ok:
        print_info("\nInstall missing packages with:")
        print_info("  pip install -e .")

    return all_ok


def check_env_file():
    """Check for .env file."""
    print_header("Environment Configuration")

    env_file = Path(".env")
    env_example = Path(".env.example")

    if env_file.exists():
        print_check(".env file", True, "Found")

        from dotenv import load_dotenv
        load_dotenv()

        if os.getenv("INVOICE_API_URL"):
            print_check("API URL", True, os.getenv("INVOICE_API_URL"))
        else:
            print_info("INVOICE_API_URL not set (using http://localhost:8080)")

        return True
    else:
        print_check(".env file", False, "Not found (defaults will be used)")
        if env_example.exists():
            print_info("Copy .env.example to .env and configure:")
            print_info("  cp .env.example .env")
        return False


def check_api_server():
    """Check the extraction API is reachable."""
    print_header("Invoice Extraction API")

    try:
        sys.path.insert(0, str(Path(__file__).parent.parent))
        from invoice_desk.config import ApiConfig, get_config
    except ImportError as e:
        print_warning(f"Cannot import invoice_desk ({e}) - skipping API check")
        return False

    base_url = get_config().api.base_url
    is_ok, message = ApiConfig.validate_connection(base_url)
    print_check("API Server", is_ok, message)
    if not is_ok:
        print_info("Start the backend or point INVOICE_API_URL at a running instance")
    return is_ok


def main():
    """Run all checks."""
    print("\n" + "=" * 60)
    print("  Invoice Desk - Setup Validation")
    print("=" * 60)

    results = {}

    # Run checks
    results["python"] = check_python_version()
    results["packages"] = check_python_packages()
    results["env"] = check_env_file()
    results["api"] = check_api_server() if results["packages"] else False

    # Summary
    print_header("Summary")

    critical_ok = results["python"] and results["packages"]

    if critical_ok and results["api"]:
        print("✅ System is ready to run the application!")
        print("\nStart with:")
        print("  streamlit run invoice_desk/main.py")
    elif critical_ok:
        print("⚠️  The app will start, but the API is not reachable yet.")
        print("\nStart with:")
        print("  streamlit run invoice_desk/main.py")
    else:
        print("❌ Some requirements are missing:")

        if not results["python"]:
            print("  - Python 3.10+ required")
        if not results["packages"]:
            print("  - Some Python packages missing (run: pip install -e .)")

    print()
    return 0 if critical_ok else 1


if __name__ == "__main__":
    sys.exit(main())
