"""Streamlit panels for upload, invoice list and invoice detail."""
