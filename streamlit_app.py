"""Streamlit Cloud entry point; the page lives in app/app.py."""

from app.app import main

main()
