from pathlib import Path
import sys

from streamlit.web import cli as stcli


def main() -> None:
    """Launch the dashboard via `python -m app`; extra arguments go to Streamlit."""
    script = Path(__file__).resolve().parent / "app.py"
    sys.argv = ["streamlit", "run", str(script), *sys.argv[1:]]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
