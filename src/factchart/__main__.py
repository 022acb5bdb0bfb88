"""Command-line entry point: python -m factchart [chart-data.json]"""
from factchart.main import main

if __name__ == "__main__":
    main()
