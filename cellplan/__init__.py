"""Cellular network planning dashboard: data server, analysis and Streamlit UI."""

__version__ = "0.1.0"
