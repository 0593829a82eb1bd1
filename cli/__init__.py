"""Command-line front end for the SARIF ingestion engine."""
